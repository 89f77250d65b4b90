"""
Trending and charts feature package.

Scores catalog items by engagement, ranks them, tracks weekly chart
positions per category and merges categories into a global leaderboard.
Domain models, repositories, pipeline services, jobs and the HTTP router
all live under this package.
"""

"""
GitHub Pulse Overview - Weekly pull-request activity for GitHub repositories.

A CLI tool that:
1. Fetches pull requests for one or more repositories
2. Buckets them into merged, opened or updated, and closed within the last week
3. Prints a styled summary with links and relative times

Usage:
    github-pulse-overview -r owner/repo,other/repo
    github-pulse-overview -f repos.json
"""

__version__ = "0.1.0"
__author__ = "GitHub Pulse Overview"

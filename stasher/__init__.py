"""
Stasher - Media library organization tool.

Organizes movies, TV episodes and anime episodes by:
- Parsing titles, seasons, episodes and years out of noisy filenames
- Resolving metadata with TMDB and Jikan, cached in SQLite
- Renaming files into a Category/Letter/Title (Year) layout
- Writing synopsis and poster sidecars next to each title
"""

__version__ = "0.1.0"

"""GlobalSoft — a two-sided software marketplace.

Sellers list downloadable software, buyers browse, purchase, and message
sellers. A realtime relay pushes new listings and chat messages to
connected clients.
"""

__version__ = "0.1.0"

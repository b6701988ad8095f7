"""Console manager for library reader cards: a reader tree, a card-number pool and menu screens."""

__version__ = "0.1.0"
"""Search, retrieve, cache and display IETF RFCs and Internet-Drafts."""

__version__ = "0.3.0"

"""Deductly - T2125 tax mapping engine for Canadian gig-economy drivers."""

__version__ = "0.1.0"

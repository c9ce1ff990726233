"""DAO shell: session orchestration for blockchain organizations."""

__version__ = "0.1.0"

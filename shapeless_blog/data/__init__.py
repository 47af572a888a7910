"""Repository functions. Every call takes the SQLAlchemy session to run on."""

# File: scribe/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. All feature tables (Engine, Transcript, Segment, Dictionary) inherit from this.
Base = declarative_base()

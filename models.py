from extensions import db
from datetime import datetime, timezone
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
import uuid

# JSONB on PostgreSQL, JSON elsewhere; both support path lookups in filters
DocumentJSON = JSON().with_variant(JSONB(), 'postgresql')


def utcnow():
    return datetime.now(timezone.utc)


class Document(db.Model):
    """One stored document of a named collection (SQL document backend)"""
    __tablename__ = 'documents'
    collection = db.Column(db.String(100), primary_key=True)
    id = db.Column(db.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = db.Column(db.String(128), index=True)
    data = db.Column(DocumentJSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        db.Index('idx_documents_collection_owner', 'collection', 'owner_id'),
    )


class Account(db.Model):
    """Email/password identity for the local auth backend"""
    __tablename__ = 'accounts'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

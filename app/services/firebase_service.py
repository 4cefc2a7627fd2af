"""
Firebase service for Firestore and Authentication operations
"""

from __future__ import annotations
import asyncio
import json
import logging
import os
from typing import Optional, Dict, Any, List, Callable, Iterable

import firebase_admin
from firebase_admin import credentials, firestore, auth as firebase_auth
from google.api_core import exceptions as google_exceptions

from app.config import settings
from app.models.collections import COLLECTION_USERS
from app.models.user import User, firestore_user_to_model

logger = logging.getLogger(__name__)

# Firestore rejects write batches larger than this.
BATCH_LIMIT = 500


class DocumentExistsError(Exception):
    """Raised by create_document when the target document already exists"""


class FirebaseService:
    """Service for Firebase operations"""

    _instance = None
    _initialized = False

    def __new__(cls):
        """Singleton pattern to ensure only one Firebase instance"""
        if cls._instance is None:
            cls._instance = super(FirebaseService, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, "_db"):
            self._db = None

    def _ensure_app(self):
        if not FirebaseService._initialized:
            self._initialize_firebase()
            FirebaseService._initialized = True

    @property
    def db(self):
        """Firestore client, created on first use"""
        if self._db is None:
            self._ensure_app()
            self._db = firestore.client()
        return self._db

    def _initialize_firebase(self):
        """Initialize Firebase Admin SDK with credentials"""
        try:
            # Check if already initialized
            firebase_admin.get_app()
            logger.info("Firebase already initialized")
            return
        except ValueError:
            pass

        try:
            if settings.DEV_MODE and settings.FIREBASE_EMULATOR_HOST:
                # Use emulator for development
                os.environ["FIRESTORE_EMULATOR_HOST"] = settings.FIREBASE_EMULATOR_HOST
                options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
                firebase_admin.initialize_app(options=options)
                logger.info(
                    f"Firebase initialized with emulator: {settings.FIREBASE_EMULATOR_HOST}")
                return

            if settings.FIREBASE_CREDENTIALS_JSON:
                try:
                    cred = credentials.Certificate(
                        json.loads(settings.FIREBASE_CREDENTIALS_JSON))
                except json.JSONDecodeError as e:
                    logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")
                    raise
            else:
                # Fallback to file path
                cred = credentials.Certificate(
                    settings.FIREBASE_CREDENTIALS_PATH)

            firebase_admin.initialize_app(cred)
            logger.info("Firebase Admin SDK initialization successful.")
        except Exception as e:
            logger.error(f"Firebase Admin SDK initialization failed: {e}")
            raise  # Re-raise to prevent the app from running with a broken Firebase setup

    # ============================================
    # DOCUMENT OPERATIONS
    # ============================================

    async def get_document(self, path: str) -> Optional[Dict[str, Any]]:
        """Read ``collection/doc``; None when missing"""
        doc = await asyncio.to_thread(self.db.document(path).get)
        if doc.exists:
            return doc.to_dict() or {}
        return None

    async def set_document(self, path: str, data: Dict[str, Any], merge: bool = False) -> None:
        await asyncio.to_thread(self.db.document(path).set, data, merge=merge)

    async def create_document(self, path: str, data: Dict[str, Any]) -> None:
        """
        Create a document, failing if it already exists

        Raises:
            DocumentExistsError: a document is already stored at ``path``
        """
        try:
            await asyncio.to_thread(self.db.document(path).create, data)
        except google_exceptions.AlreadyExists as e:
            raise DocumentExistsError(path) from e

    async def add_document(self, collection_name: str, data: Dict[str, Any]) -> str:
        """Store a document under an auto-generated id and return the id"""
        ref = self.db.collection(collection_name).document()
        await asyncio.to_thread(ref.set, data)
        return ref.id

    async def update_document(self, path: str, data: Dict[str, Any]) -> None:
        await asyncio.to_thread(self.db.document(path).update, data)

    async def delete_document(self, path: str) -> None:
        await asyncio.to_thread(self.db.document(path).delete)

    async def array_union(self, path: str, field: str, values: List[Any]) -> None:
        """Add values to an array field without duplicates"""
        await asyncio.to_thread(
            self.db.document(path).update, {field: firestore.ArrayUnion(values)}
        )

    async def array_remove(self, path: str, field: str, values: List[Any]) -> None:
        """Remove every occurrence of the values from an array field"""
        await asyncio.to_thread(
            self.db.document(path).update, {field: firestore.ArrayRemove(values)}
        )

    async def batch_update(self, updates: Iterable[tuple[str, Dict[str, Any]]]) -> int:
        """Apply (path, data) updates in write batches; returns the count"""
        items = list(updates)

        def _commit():
            for start in range(0, len(items), BATCH_LIMIT):
                batch = self.db.batch()
                for path, data in items[start:start + BATCH_LIMIT]:
                    batch.update(self.db.document(path), data)
                batch.commit()

        if items:
            await asyncio.to_thread(_commit)
        return len(items)

    async def batch_delete(self, paths: Iterable[str]) -> int:
        """Delete documents in write batches; returns the count"""
        items = list(paths)

        def _commit():
            for start in range(0, len(items), BATCH_LIMIT):
                batch = self.db.batch()
                for path in items[start:start + BATCH_LIMIT]:
                    batch.delete(self.db.document(path))
                batch.commit()

        if items:
            await asyncio.to_thread(_commit)
        return len(items)

    async def transition_document(
        self,
        path: str,
        mutate: Callable[[Dict[str, Any]], Dict[str, Any]],
    ) -> Optional[Dict[str, Any]]:
        """
        Read-check-write a document inside a Firestore transaction.

        ``mutate`` receives the current data and returns the fields to update,
        or raises to abort. It may run more than once if the transaction is
        retried, so it must not have side effects.

        Returns:
            The document data after the update, or None if it does not exist
        """

        def _run():
            ref = self.db.document(path)
            transaction = self.db.transaction()

            @firestore.transactional
            def _apply(tx):
                snapshot = ref.get(transaction=tx)
                if not snapshot.exists:
                    return None
                data = snapshot.to_dict() or {}
                updates = mutate(data)
                tx.update(ref, updates)
                return {**data, **updates}

            return _apply(transaction)

        return await asyncio.to_thread(_run)

    # ============================================
    # GENERIC QUERY OPERATIONS
    # ============================================
    async def query_collection(
        self,
        collection_name: str,
        filters: Optional[List[tuple]] = None,
        order_by: Optional[str] = None,
        direction: str = firestore.Query.ASCENDING,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        get_total_count: bool = False,
    ) -> tuple[List[tuple[str, Dict[str, Any]]], int]:
        """
        Queries a Firestore collection with filters, ordering, and pagination.

        Args:
            collection_name: The name of the Firestore collection.
            filters: A list of (field, op, value) tuples, e.g.
                     [("status", "==", "pending"), ("organizationId", "in", ids)].
                     A dict of {field: value} is accepted as '==' filters.
            order_by: The field to order the results by.
            direction: The order direction ('ASCENDING' or 'DESCENDING').
            limit: The maximum number of documents to return.
            offset: The number of documents to skip.
            get_total_count: If True, also count every document matching the filters.

        Returns:
            A tuple of ([(document_id, document_data), ...], total_count).
            total_count is 0 unless get_total_count is set.
        """
        query = self.db.collection(collection_name)

        if filters:
            if isinstance(filters, dict):
                filters = [(k, "==", v) for k, v in filters.items()]
            for f in filters:
                if len(f) != 3:
                    raise ValueError(
                        f"Invalid filter format: {f}. Expected (field, op, value)")
                query = query.where(f[0], f[1], f[2])

        def _get_stream_data(q):
            return [(doc.id, doc.to_dict() or {}) for doc in q.stream()]

        total_count = 0
        if get_total_count:
            # Streams every match; acceptable at the collection sizes involved.
            total_count = len(await asyncio.to_thread(_get_stream_data, query))

        if order_by:
            query = query.order_by(order_by, direction=direction)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        docs = await asyncio.to_thread(_get_stream_data, query)
        return docs, total_count

    # ============================================
    # AUTHENTICATION
    # ============================================

    async def verify_id_token(self, id_token: str) -> Dict[str, Any]:
        """
        Verify Firebase ID token

        Raises:
            ValueError: the token is invalid or expired
        """
        self._ensure_app()
        try:
            return await asyncio.to_thread(firebase_auth.verify_id_token, id_token)
        except Exception as e:
            raise ValueError(f"Invalid token: {str(e)}") from e

    async def create_auth_user(self, email: str, password: str, display_name: Optional[str] = None) -> str:
        """
        Create a Firebase Authentication account and return its UID

        Raises:
            ValueError: the email is already registered
        """
        self._ensure_app()
        try:
            record = await asyncio.to_thread(
                firebase_auth.create_user,
                email=email,
                password=password,
                display_name=display_name,
            )
            return record.uid
        except firebase_auth.EmailAlreadyExistsError:
            raise ValueError("Email already exists")

    async def get_user_by_uid(self, uid: str) -> Optional[User]:
        """Load the Users document for a Firebase UID"""
        data = await self.get_document(f"{COLLECTION_USERS}/{uid}")
        if data is None:
            return None
        try:
            return firestore_user_to_model(data, uid)
        except Exception as e:
            logger.warning(f"Validation failed for user {uid}: {e}")
            return User(uid=uid, email=data.get("email") or "")


# Global Firebase service instance
firebase_service = FirebaseService()

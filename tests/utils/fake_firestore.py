"""
In-memory stand-in for the parts of the Firestore client the service uses:
collection/document references, equality and range `where` filters, `limit`,
`stream`, `add`, `set(merge=...)`, `update`, `delete` and write batches.
"""
import copy
import operator
import uuid
from datetime import datetime, timezone

from google.api_core.exceptions import NotFound

_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda field_value, options: field_value in options,
}


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, store, collection_name, doc_id):
        self._store = store
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def _docs(self):
        return self._store.setdefault(self._collection_name, {})

    def get(self):
        return FakeSnapshot(self, copy.deepcopy(self._docs.get(self.id)))

    def set(self, data, merge=False):
        if merge and self.id in self._docs:
            self._docs[self.id].update(copy.deepcopy(data))
        else:
            self._docs[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._docs:
            raise NotFound(f"No document to update: {self._collection_name}/{self.id}")
        self._docs[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, collection_name, filters=None, limit=None):
        self._store = store
        self._collection_name = collection_name
        self._filters = filters or []
        self._limit = limit

    def where(self, field_path=None, op_string=None, value=None, *, filter=None):
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        return FakeQuery(self._store, self._collection_name, self._filters + [(field_path, op_string, value)], self._limit)

    def limit(self, count):
        return FakeQuery(self._store, self._collection_name, self._filters, count)

    def _matches(self, data):
        for field_path, op_string, value in self._filters:
            if field_path not in data:
                return False
            try:
                if not _OPERATORS[op_string](data[field_path], value):
                    return False
            except TypeError:
                return False
        return True

    def stream(self):
        docs = self._store.get(self._collection_name, {})
        results = []
        for doc_id, data in list(docs.items()):
            if self._matches(data):
                ref = FakeDocumentReference(self._store, self._collection_name, doc_id)
                results.append(FakeSnapshot(ref, copy.deepcopy(data)))
        if self._limit is not None:
            results = results[:self._limit]
        return iter(results)

    def get(self):
        return list(self.stream())


class FakeCollectionReference(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocumentReference(self._store, self._collection_name, doc_id or uuid.uuid4().hex[:20])

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return datetime.now(timezone.utc), ref


class FakeWriteBatch:
    def __init__(self):
        self._operations = []

    def set(self, reference, data, merge=False):
        self._operations.append(lambda: reference.set(data, merge=merge))

    def update(self, reference, data):
        self._operations.append(lambda: reference.update(data))

    def delete(self, reference):
        self._operations.append(reference.delete)

    def commit(self):
        for operation in self._operations:
            operation()
        self._operations = []


class FakeFirestore:
    def __init__(self):
        self.store = {}

    def collection(self, name):
        return FakeCollectionReference(self.store, name)

    def batch(self):
        return FakeWriteBatch()

    def docs(self, collection_name):
        """Raw documents of a collection, keyed by id (test helper)."""
        return self.store.get(collection_name, {})

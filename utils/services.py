"""
Collection Services - One typed service per portfolio collection
Built on the generic data access functions; records are schemas.py models
"""

from pydantic import ValidationError

from backend.errors import BackendError, DocumentNotFoundError, NotAuthenticatedError
from schemas import (
    META_ATTRS, Profile, Project, Education, Experience, Skill, Achievement,
    UserRole, ContactMessage, ProjectQuestion, ProjectFeedback
)
from .data import (
    create_document, update_document, delete_document,
    get_document, get_documents, get_current_user_id, timestamp_now
)

PROFILE_DOCUMENT_ID = 'current'


class InvalidRecordError(BackendError):
    default_code = 'invalid-argument'

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or []


def _describe(error):
    parts = []
    for item in error.errors():
        field = '.'.join(str(p) for p in item.get('loc', ())) or 'record'
        parts.append(f"{field}: {item.get('msg')}")
    return '; '.join(parts)


class CollectionService:
    """CRUD for one collection, mapping stored documents onto a pydantic model"""

    def __init__(self, client, collection, model):
        self.client = client
        self.collection = collection
        self.model = model

    def _to_record(self, doc):
        if doc is None:
            return None
        return self.model.model_validate(doc)

    def _validate(self, data):
        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            raise InvalidRecordError(f'Invalid {self.collection} record: {_describe(e)}', e.errors()) from e

    def _payload(self, record, only=None):
        payload = record.model_dump(by_alias=True, exclude=META_ATTRS)
        if only is not None:
            payload = {k: v for k, v in payload.items() if k in only}
        return payload

    def _aliased(self, data):
        """Rename attribute-style keys to their stored names"""
        fields = self.model.model_fields
        return {
            (fields[key].alias or key) if key in fields else key: value
            for key, value in data.items()
        }

    def _field_keys(self, data):
        """Stored names of the non-metadata model fields present in data"""
        keys = set()
        for name, field in self.model.model_fields.items():
            if name in META_ATTRS:
                continue
            alias = field.alias or name
            if name in data or alias in data:
                keys.add(alias)
        return keys

    def get_all(self):
        """Documents owned by the signed-in user"""
        docs = get_documents(self.client, self.collection, require_owner=True)
        return [self._to_record(d) for d in docs]

    def get_all_public(self):
        """Every document in the collection, regardless of owner"""
        docs = get_documents(self.client, self.collection)
        return [self._to_record(d) for d in docs]

    def get_by_id(self, document_id):
        return self._to_record(get_document(self.client, self.collection, document_id))

    def create(self, data, owner_id=None):
        record = self._validate(data)
        return create_document(self.client, self.collection, self._payload(record), owner_id=owner_id)

    def update(self, document_id, data):
        existing = get_document(self.client, self.collection, document_id)
        if existing is None:
            raise DocumentNotFoundError(f'{self.collection} document {document_id} does not exist')

        data = self._aliased(data)
        changed = self._field_keys(data)
        merged = self._validate({**existing, **data})
        # Validators may clear dependent fields (e.g. end_year when is_current)
        dependent = {k for k, v in self._payload(merged).items() if existing.get(k) != v}
        update_document(self.client, self.collection, document_id, self._payload(merged, only=changed | dependent))

    def delete(self, document_id):
        delete_document(self.client, self.collection, document_id)


class ExperienceService(CollectionService):
    def __init__(self, client):
        super().__init__(client, 'experiences', Experience)

    def get_all(self, type=None):
        filters = {'type': type} if type else None
        docs = get_documents(self.client, self.collection, filters, require_owner=True)
        return [self._to_record(d) for d in docs]

    def get_all_public(self, type=None):
        filters = {'type': type} if type else None
        docs = get_documents(self.client, self.collection, filters)
        return [self._to_record(d) for d in docs]


class ProfileService(CollectionService):
    """The site profile: a single document stored under a fixed id"""

    def __init__(self, client):
        super().__init__(client, 'profiles', Profile)

    def get_current(self):
        return self.get_by_id(PROFILE_DOCUMENT_ID)

    def update(self, data):
        if not get_current_user_id(self.client):
            raise NotAuthenticatedError()

        if get_document(self.client, self.collection, PROFILE_DOCUMENT_ID) is None:
            record = self._validate(data)
            create_document(self.client, self.collection, self._payload(record), document_id=PROFILE_DOCUMENT_ID)
        else:
            super().update(PROFILE_DOCUMENT_ID, data)

    def owner_id(self):
        profile = self.get_current()
        return profile.user_id if profile else None


class UserRoleService(CollectionService):
    def __init__(self, client):
        super().__init__(client, 'userRoles', UserRole)

    def find(self, user_id, role='admin'):
        docs = get_documents(self.client, self.collection, {'userId': user_id, 'role': role})
        return [self._to_record(d) for d in docs]

    def grant(self, user_id, role='admin'):
        """Give user_id the role; returns the role row id (existing or new)"""
        existing = self.find(user_id, role)
        if existing:
            return existing[0].id
        return self.create({'role': role}, owner_id=user_id)


class InboxService(CollectionService):
    """Visitor-submitted records with a status lifecycle"""

    initial_status = 'new'
    seen_status = 'read'
    archived_status = 'archived'

    def submit(self, data, owner_id):
        """Store a visitor submission addressed to owner_id; status always starts at the initial state"""
        if not owner_id:
            raise BackendError('No site owner configured to receive submissions', 'configuration')
        payload = {k: v for k, v in data.items() if k != 'status'}
        payload['status'] = self.initial_status
        return self.create(payload, owner_id=owner_id)

    def set_status(self, document_id, status):
        self.update(document_id, {'status': status})

    def mark_read(self, record):
        """Advance a record from its initial status when an admin opens it; returns True if it changed"""
        if record.status != self.initial_status:
            return False
        self.set_status(record.id, self.seen_status)
        return True

    def archive(self, document_id):
        self.set_status(document_id, self.archived_status)

    def restore(self, document_id):
        self.set_status(document_id, self.initial_status)


class ContactMessageService(InboxService):
    def __init__(self, client):
        super().__init__(client, 'contactMessages', ContactMessage)


class QuestionService(InboxService):
    initial_status = 'pending'
    seen_status = 'answered'

    def __init__(self, client):
        super().__init__(client, 'projectQuestions', ProjectQuestion)

    def mark_read(self, record):
        # Opening a question does not answer it
        return False

    def answer(self, document_id, answer):
        self.update(document_id, {
            'answer': answer,
            'answeredAt': timestamp_now(),
            'status': 'answered',
        })


class FeedbackService(InboxService):
    initial_status = 'pending'
    seen_status = 'reviewed'

    def __init__(self, client):
        super().__init__(client, 'projectFeedback', ProjectFeedback)


class PortfolioServices:
    """Every collection service bound to one backend client"""

    def __init__(self, client):
        self.client = client
        self.profiles = ProfileService(client)
        self.projects = CollectionService(client, 'projects', Project)
        self.education = CollectionService(client, 'education', Education)
        self.experiences = ExperienceService(client)
        self.skills = CollectionService(client, 'skills', Skill)
        self.achievements = CollectionService(client, 'achievements', Achievement)
        self.user_roles = UserRoleService(client)
        self.contact_messages = ContactMessageService(client)
        self.questions = QuestionService(client)
        self.feedback = FeedbackService(client)


__all__ = [
    'PROFILE_DOCUMENT_ID',
    'InvalidRecordError',
    'CollectionService',
    'ExperienceService',
    'ProfileService',
    'UserRoleService',
    'InboxService',
    'ContactMessageService',
    'QuestionService',
    'FeedbackService',
    'PortfolioServices',
]

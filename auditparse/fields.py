"""Field taxonomy — canonical audit fields and the source keys that carry them.

Every semantic field belongs to one section of an audit document. The strict
extractor reads only the first parent key of the section and the first key of
the field; the permissive extractor walks all parent candidates, then the
top-level fallbacks.
"""

from dataclasses import dataclass
from enum import Enum


class Section(Enum):
    TOP_LEVEL = "top_level"
    USER = "user"
    OBJECT_REF = "object_ref"
    RESPONSE_STATUS = "response_status"
    ANNOTATIONS = "annotations"


class ValueKind(Enum):
    STRING = "string"
    INT = "int"
    STRING_LIST = "string_list"
    IP_LIST = "ip_list"        # array of strings or a single bare string
    MAPPING = "mapping"
    USER_REF = "user_ref"      # bare string or {"username": ...}


class Field(Enum):
    TIMESTAMP = "timestamp"
    USERNAME = "username"
    UID = "uid"
    GROUPS = "groups"
    EXTRA = "extra"
    IMPERSONATED_USER = "impersonated_user"
    VERB = "verb"
    RESOURCE = "resource"
    NAMESPACE = "namespace"
    NAME = "name"
    API_GROUP = "api_group"
    API_VERSION = "api_version"
    STATUS_CODE = "status_code"
    STATUS_MESSAGE = "status_message"
    STATUS_REASON = "status_reason"
    REQUEST_URI = "request_uri"
    USER_AGENT = "user_agent"
    SOURCE_IPS = "source_ips"
    AUTH_DECISION = "auth_decision"
    AUTHZ_DECISION = "authz_decision"
    ANNOTATIONS = "annotations"
    HEADERS = "headers"


# Parent object names per section, most common producer first.
SECTION_PARENTS: dict[Section, tuple[str, ...]] = {
    Section.TOP_LEVEL: (),
    Section.USER: ("user", "userInfo", "requestUser"),
    Section.OBJECT_REF: ("objectRef", "object", "resource"),
    Section.RESPONSE_STATUS: ("responseStatus", "status", "response"),
    Section.ANNOTATIONS: ("annotations",),
}


@dataclass(frozen=True)
class FieldSpec:
    section: Section
    keys: tuple[str, ...]
    kind: ValueKind = ValueKind.STRING
    top_level_keys: tuple[str, ...] = ()

    @property
    def strict_key(self) -> str:
        return self.keys[0]

    @property
    def strict_parent(self) -> str | None:
        parents = SECTION_PARENTS[self.section]
        return parents[0] if parents else None


TAXONOMY: dict[Field, FieldSpec] = {
    Field.TIMESTAMP: FieldSpec(
        Section.TOP_LEVEL,
        ("requestReceivedTimestamp", "timestamp", "time", "created", "stageTimestamp"),
    ),
    Field.USERNAME: FieldSpec(
        Section.USER,
        ("username", "name", "user"),
        top_level_keys=("username", "requestUser", "authenticatedUser"),
    ),
    Field.UID: FieldSpec(Section.USER, ("uid", "id")),
    Field.GROUPS: FieldSpec(Section.USER, ("groups", "group"), ValueKind.STRING_LIST),
    Field.EXTRA: FieldSpec(Section.USER, ("extra",), ValueKind.MAPPING),
    Field.IMPERSONATED_USER: FieldSpec(
        Section.TOP_LEVEL,
        ("impersonatedUser", "impersonated_user", "impersonate"),
        ValueKind.USER_REF,
    ),
    Field.VERB: FieldSpec(
        Section.TOP_LEVEL,
        ("verb", "method", "action", "operation", "requestMethod", "httpMethod"),
    ),
    Field.RESOURCE: FieldSpec(
        Section.OBJECT_REF, ("resource", "kind", "type"), top_level_keys=("resource",)
    ),
    Field.NAMESPACE: FieldSpec(
        Section.OBJECT_REF, ("namespace", "ns"), top_level_keys=("namespace",)
    ),
    Field.NAME: FieldSpec(Section.OBJECT_REF, ("name", "id")),
    Field.API_GROUP: FieldSpec(Section.OBJECT_REF, ("apiGroup", "group")),
    Field.API_VERSION: FieldSpec(Section.OBJECT_REF, ("apiVersion", "version")),
    Field.STATUS_CODE: FieldSpec(
        Section.RESPONSE_STATUS,
        ("code", "statusCode", "httpCode"),
        ValueKind.INT,
        top_level_keys=("statusCode", "code", "status"),
    ),
    Field.STATUS_MESSAGE: FieldSpec(
        Section.RESPONSE_STATUS, ("message", "statusMessage", "reason")
    ),
    Field.STATUS_REASON: FieldSpec(Section.RESPONSE_STATUS, ("reason", "statusReason")),
    Field.REQUEST_URI: FieldSpec(Section.TOP_LEVEL, ("requestURI", "uri", "path", "url")),
    Field.USER_AGENT: FieldSpec(Section.TOP_LEVEL, ("userAgent", "user-agent", "agent")),
    Field.SOURCE_IPS: FieldSpec(
        Section.TOP_LEVEL,
        ("sourceIPs", "sourceIP", "clientIP", "remoteAddr"),
        ValueKind.IP_LIST,
    ),
    Field.AUTH_DECISION: FieldSpec(
        Section.ANNOTATIONS,
        ("authentication.openshift.io/decision", "authenticationDecision",
         "authDecision", "auth_decision"),
        top_level_keys=("authentication.openshift.io/decision", "authenticationDecision",
                        "authDecision", "auth_decision"),
    ),
    Field.AUTHZ_DECISION: FieldSpec(
        Section.ANNOTATIONS,
        ("authorization.k8s.io/decision", "authorizationDecision",
         "authzDecision", "authz_decision"),
        top_level_keys=("authorization.k8s.io/decision", "authorizationDecision",
                        "authzDecision", "authz_decision"),
    ),
    Field.ANNOTATIONS: FieldSpec(
        Section.TOP_LEVEL, ("annotations", "metadata"), ValueKind.MAPPING
    ),
    Field.HEADERS: FieldSpec(
        Section.TOP_LEVEL,
        ("headers", "requestHeaders", "responseHeaders"),
        ValueKind.MAPPING,
    ),
}


def lookup_field(name: str) -> Field | None:
    """Resolve a field by enum name, value or primary source key, case-insensitively."""
    normalized = name.replace("-", "_").lower()
    for field in Field:
        if normalized in (field.value, field.name.lower(), field.value.replace("_", "")):
            return field
    # source key names of the primary producer ("requestReceivedTimestamp", "code")
    for field, spec in TAXONOMY.items():
        if normalized == spec.strict_key.lower():
            return field
    return None

"""Identifier to constant-name normalization.

``db.client.operation.duration`` becomes ``DBClientOperationDuration``:
segments split on ``.`` and ``_`` are capitalized and joined, then known
initialisms are upper-cased and a few literal replacements applied.
"""

import re
from typing import Iterable, Optional

from domains.semconv.error import InvalidConstantNameError, NamingCollisionError

DEFAULT_INITIALISMS = [
    "ACL",
    "AIX",
    "AKS",
    "AMD64",
    "API",
    "ARM32",
    "ARM64",
    "ARN",
    "ARNs",
    "ASCII",
    "AWS",
    "CPU",
    "CSS",
    "DB",
    "DC",
    "DNS",
    "EC2",
    "ECS",
    "EDB",
    "EKS",
    "EOF",
    "GCP",
    "GRPC",
    "GUID",
    "HPUX",
    "HSQLDB",
    "HTML",
    "HTTP",
    "HTTPS",
    "IA64",
    "ID",
    "IP",
    "JDBC",
    "JSON",
    "K8S",
    "LHS",
    "MSSQL",
    "OS",
    "PHP",
    "PID",
    "PPC32",
    "PPC64",
    "QPS",
    "QUIC",
    "RAM",
    "RHS",
    "RPC",
    "SDK",
    "SLA",
    "SMTP",
    "SPDY",
    "SQL",
    "SSH",
    "TCP",
    "TLS",
    "TTL",
    "UDP",
    "UID",
    "UI",
    "UUID",
    "URI",
    "URL",
    "UTF8",
    "VM",
    "XML",
    "XMPP",
    "XSRF",
    "XSS",
    "ZOS",
    "CronJob",
    "WebEngine",
    "MySQL",
    "PostgreSQL",
    "MariaDB",
    "MaxDB",
    "FirstSQL",
    "InstantDB",
    "HBase",
    "MongoDB",
    "CouchDB",
    "CosmosDB",
    "DynamoDB",
    "HanaDB",
    "FreeBSD",
    "NetBSD",
    "OpenBSD",
    "DragonflyBSD",
    "InProc",
    "FaaS",
]

# Substring rewrites applied after initialisms, in this order
DEFAULT_REPLACEMENTS = {
    "RedisDatabase": "RedisDB",
    "IPTCP": "TCP",
    "IPUDP": "UDP",
    "Lineno": "LineNumber",
}

CONSTANT_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
SEGMENT_SEPARATORS = re.compile(r"[._]")


class IdentifierNormalizer:
    """Turns dotted metric identifiers into Pascal-case constant base names."""

    def __init__(
        self,
        extra_initialisms: Optional[Iterable[str]] = None,
        extra_replacements: Optional[dict[str, str]] = None,
    ):
        initialisms = list(DEFAULT_INITIALISMS)
        for initialism in extra_initialisms or []:
            if initialism not in initialisms:
                initialisms.append(initialism)

        self.replacements = dict(DEFAULT_REPLACEMENTS)
        self.replacements.update(extra_replacements or {})

        # A title-cased initialism only counts when followed by an upper-case
        # letter, a digit, whitespace or the end, so "Identifier" keeps its "Id"
        self._initialism_rules = [
            (re.compile(re.escape(initialism.lower().capitalize()) + r"(?=[A-Z\s\d]|$)"), initialism)
            for initialism in initialisms
        ]

    @staticmethod
    def to_pascal(identifier: str) -> str:
        """Capitalizes and concatenates the ``.``/``_`` separated segments."""
        return "".join(token[:1].upper() + token[1:].lower() for token in SEGMENT_SEPARATORS.split(identifier))

    def constant_name(self, identifier: str) -> str:
        """Returns the constant base name for ``identifier``.

        Raises:
            InvalidConstantNameError: If the result is not a usable identifier.
        """
        name = self.to_pascal(identifier)
        for pattern, initialism in self._initialism_rules:
            name = pattern.sub(initialism, name)
        for current, replacement in self.replacements.items():
            name = name.replace(current, replacement)

        if not CONSTANT_NAME_PATTERN.match(name):
            raise InvalidConstantNameError(identifier=identifier, constant_name=name)
        return name

    def assign(self, identifiers: Iterable[str]) -> dict[str, str]:
        """Maps every identifier to its constant base name.

        Raises:
            NamingCollisionError: If two identifiers end up with the same name.
            InvalidConstantNameError: If any identifier cannot be normalized.
        """
        names: dict[str, str] = {}
        claimed: dict[str, list[str]] = {}
        for identifier in identifiers:
            name = self.constant_name(identifier)
            names[identifier] = name
            claimed.setdefault(name, []).append(identifier)

        collisions = {name: ids for name, ids in claimed.items() if len(ids) > 1}
        if collisions:
            name = sorted(collisions)[0]
            raise NamingCollisionError(constant_name=name, identifiers=sorted(collisions[name]))
        return names

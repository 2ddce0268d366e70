"""Panel payload builders shared by the tests."""

from typing import Any, Dict


def server_payload(*names: str) -> Dict[str, Any]:
    return {
        "object": "list",
        "data": [
            {"object": "server", "attributes": {
                "identifier": f"id{i}", "uuid": f"uuid-{i}", "name": n,
                "node": "ignored",
            }}
            for i, n in enumerate(names, 1)
        ],
    }


def backup_payload(*entries) -> Dict[str, Any]:
    return {
        "object": "list",
        "data": [
            {"object": "backup", "attributes": {
                "uuid": uuid, "name": name, "created_at": created, "bytes": size,
                "is_successful": True,
            }}
            for uuid, name, created, size in entries
        ],
    }

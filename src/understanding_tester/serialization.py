# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Utilities for exporting session objects (like prompt history) as JSON"""
# Python Built-Ins:
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from enum import Enum
from json import dumps
from typing import Any, Optional, Sequence


def default_serializer(obj):
    """Handler for objects not serializable by default Python json.dumps

    Usage
    -----
    >>> import json
    >>> json.dumps(my_object, default=default_serializer)
    """

    if isinstance(obj, (date, time)):
        return obj.isoformat()

    if isinstance(obj, Enum):
        # Enum instances just take their underlying value, ignoring their 'name':
        return obj.value

    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)

    if isinstance(obj, (set, frozenset)):
        return sorted(obj)

    try:
        return obj.__dict__
    except AttributeError:
        return None


def json_dumps(obj, **kwargs) -> str:
    """Wrapper around json.dumps() that handles custom object serialization

    Parameters
    ----------
    obj :
        The object to be serialized
    **kwargs :
        As per standard `json.dumps()`, but the `default` argument is already set"""
    return dumps(obj, default=default_serializer, **kwargs)


def history_json(
    history: Sequence[Any],
    model_id: Optional[str] = None,
    exported_at: Optional[datetime] = None,
) -> str:
    """Export a prompt history (most recent first) as an indented JSON document for download"""
    return json_dumps(
        {
            "exported_at": exported_at or datetime.now(),
            "model_id": model_id,
            "entries": list(history),
        },
        indent=2,
        ensure_ascii=False,
    )

"""
Field types and query serializers shared by the request serializers.

The API speaks camelCase; serializers declare camelCase field names and
services receive ``validated_data`` as-is.
"""
from __future__ import annotations

import re
from datetime import datetime

import bleach
from rest_framework import serializers

from core.ids import OBJECT_ID_RE

PHONE_RE = re.compile(r'^[\d\s\-\+\(\)]{10,}$')
TIME_RE = re.compile(r'^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$')


def clean_text(value) -> str:
    return bleach.clean((value or '').strip(), tags=set(), strip=True)


class CleanCharField(serializers.CharField):
    """Free text with any markup stripped."""

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


class ObjectIdField(serializers.CharField):
    default_error_messages = {'invalid_id': 'Invalid ID'}

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if not OBJECT_ID_RE.match(value):
            self.fail('invalid_id')
        return value.lower()


class PhoneField(serializers.CharField):
    default_error_messages = {'invalid_phone': 'Invalid phone number format'}

    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', 32)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value and not PHONE_RE.match(value):
            self.fail('invalid_phone')
        return value


class TimeSlotField(serializers.CharField):
    """``H:MM`` or ``HH:MM`` on a 24 hour clock, normalised to ``HH:MM``."""
    default_error_messages = {'invalid_time': 'Please provide time in HH:MM format'}

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        m = TIME_RE.match(value)
        if not m:
            self.fail('invalid_time')
        return f"{int(m.group(1)):02d}:{m.group(2)}"


class DayField(serializers.DateField):
    """A calendar day given as an ISO date or an ISO datetime."""

    def to_internal_value(self, value):
        if isinstance(value, str) and 'T' in value:
            try:
                return datetime.fromisoformat(value.strip().replace('Z', '+00:00')).date()
            except ValueError:
                self.fail('invalid', format='YYYY-MM-DD')
        return super().to_internal_value(value)


class PaginationQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=10)


class SearchQuerySerializer(PaginationQuerySerializer):
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)

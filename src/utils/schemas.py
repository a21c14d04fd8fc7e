from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE
from src.models import ReservationStatus, ToolStatus
from src.utils.errors import ReservationValidationError

NOTE_LENGTH = validate.Length(max=1000)


class ReservationRequestSchema(Schema):
    """Schema for creating reservations"""
    tool_id = fields.Str(required=True, validate=validate.Length(min=1, max=36))
    start_date = fields.Date(required=True)
    end_date = fields.Date(required=True)
    note = fields.Str(validate=NOTE_LENGTH, allow_none=True)


class ReservationActionSchema(Schema):
    """Schema for approve/cancel/pickup/return bodies"""
    note = fields.Str(validate=NOTE_LENGTH, allow_none=True)


class DeclineRequestSchema(Schema):
    """Schema for declining a reservation; the reason itself is checked by the service"""
    reason = fields.Str(validate=NOTE_LENGTH, allow_none=True)


class ReservationSearchSchema(Schema):
    """Schema for reservation list query parameters"""

    class Meta:
        # Cache busters and tracking params are ignored
        unknown = EXCLUDE

    role = fields.Str(validate=validate.OneOf(['all', 'borrower', 'lender']), load_default='all')
    status = fields.Str(allow_none=True)  # comma separated
    tool_id = fields.Str(allow_none=True)
    page = fields.Int(validate=validate.Range(min=1), load_default=1)
    per_page = fields.Int(validate=validate.Range(min=1), allow_none=True)

    @validates_schema
    def validate_status(self, data, **kwargs):
        valid = {s.value for s in ReservationStatus}
        for status in (data.get('status') or '').split(','):
            if status and status not in valid:
                raise ValidationError(f'Unknown status: {status}', 'status')


class CalendarQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    from_date = fields.Date(data_key='from', allow_none=True)


class ToolPolicyRequestSchema(Schema):
    """Schema for creating/updating a tool's scheduling policy"""
    owner_id = fields.Str(validate=validate.Length(min=1, max=36))
    name = fields.Str(validate=validate.Length(max=255), allow_none=True)
    status = fields.Str(validate=validate.OneOf([s.value for s in ToolStatus]))
    advance_notice_days = fields.Int(validate=validate.Range(min=0))
    max_loan_days = fields.Int(validate=validate.Range(min=1))


class ReservationEventResponseSchema(Schema):
    id = fields.Int(dump_only=True)
    action = fields.Str()
    actor_id = fields.Str()
    from_status = fields.Str(allow_none=True)
    to_status = fields.Str()
    note = fields.Str(allow_none=True)
    created_at = fields.Str(dump_only=True)  # Already converted to ISO string


class ReservationResponseSchema(Schema):
    """Schema for reservation responses"""
    id = fields.Str(dump_only=True)
    tool_id = fields.Str()
    borrower_id = fields.Str()
    owner_id = fields.Str(allow_none=True)
    status = fields.Str()
    start_date = fields.Str()  # Already converted to ISO string
    end_date = fields.Str()
    note = fields.Str(allow_none=True)
    owner_note = fields.Str(allow_none=True)
    pickup_confirmed_at = fields.Str(allow_none=True)
    return_confirmed_at = fields.Str(allow_none=True)
    early_pickup = fields.Boolean()
    role = fields.Str()
    permitted_actions = fields.List(fields.Str())
    history = fields.List(fields.Nested(ReservationEventResponseSchema))
    created_at = fields.Str(dump_only=True)
    updated_at = fields.Str(dump_only=True)


class ToolPolicyResponseSchema(Schema):
    """Schema for tool policy responses"""
    id = fields.Str(dump_only=True)
    owner_id = fields.Str()
    name = fields.Str(allow_none=True)
    status = fields.Str()
    advance_notice_days = fields.Int()
    max_loan_days = fields.Int()
    created_at = fields.Str(dump_only=True)
    updated_at = fields.Str(dump_only=True)


def load_request(schema, payload):
    """Load `payload` with `schema`, raising the service's validation error on failure"""
    try:
        return schema.load(payload)
    except ValidationError as e:
        raise ReservationValidationError('Request data validation failed', details=e.messages)

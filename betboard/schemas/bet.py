"""Marshmallow schemas for bet entries and the views built from them."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

VARIANTS = ["jodi", "single"]


class BetCreateSchema(Schema):
    """Validate the shape of a submission; number/amount rules live in BetService."""

    number = fields.String(required=True)
    amount = fields.Raw(required=True)
    variant = fields.String(required=True, validate=validate.OneOf(VARIANTS))
    date = fields.String(required=False, load_default=None)


class BetSchema(Schema):
    """Serialize a stored entry."""

    id = fields.String(required=True)
    number = fields.String(required=True)
    amount = fields.Float(required=True)
    variant = fields.String(attribute="type", required=True)
    date = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    settled = fields.Boolean(required=True)
    actor_id = fields.String(allow_none=True)


class ViewQuerySchema(Schema):
    """Query string for (date, variant) scoped views; date defaults to today."""

    class Meta:
        unknown = EXCLUDE

    date = fields.String(required=False, load_default=None)
    variant = fields.String(required=False, load_default="jodi", validate=validate.OneOf(VARIANTS))


class TimeSlotSchema(Schema):
    start = fields.DateTime(required=True)
    end = fields.DateTime(required=True)
    label = fields.String(required=True)


class SummaryItemSchema(Schema):
    number = fields.String(required=True)
    total = fields.Float(required=True)
    user_count = fields.Integer(required=True)
    min_amount = fields.Float(required=True)


class SlotSummarySchema(Schema):
    slot = fields.Nested(TimeSlotSchema, required=True)
    items = fields.List(fields.Nested(SummaryItemSchema), required=True)
    entry_count = fields.Integer(required=True)
    least_bet = fields.List(fields.String(), required=True)


class CurrentSlotPreviewSchema(Schema):
    slot = fields.Nested(TimeSlotSchema, required=True)
    date = fields.String(required=True)
    items = fields.List(fields.Nested(SummaryItemSchema), required=True)
    entry_count = fields.Integer(required=True)

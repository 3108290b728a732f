"""Schemas for promotions, the dashboard view and the results viewer."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates

from betboard.schemas.bet import (
    VARIANTS,
    BetSchema,
    CurrentSlotPreviewSchema,
    SlotSummarySchema,
    SummaryItemSchema,
    TimeSlotSchema,
)


class PromotionRequestSchema(Schema):
    date = fields.String(required=False, load_default=None)
    # None means every watched variant.
    variant = fields.String(required=False, load_default=None, validate=validate.OneOf(VARIANTS))
    scope = fields.String(
        required=False,
        load_default="previous_slot",
        validate=validate.OneOf(["previous_slot", "backlog"]),
    )


class PromotionResultSchema(Schema):
    date = fields.String(required=True)
    variant = fields.Function(lambda r: r.variant.value)
    cutoff = fields.DateTime(required=True)
    promoted = fields.Integer(required=True)
    already_settled = fields.Integer(required=True)


class DashboardSelectSchema(Schema):
    date = fields.String(required=False, load_default=None)
    variants = fields.List(
        fields.String(validate=validate.OneOf(VARIANTS)),
        required=False,
        load_default=None,
    )

    @validates("variants")
    def _validate_variants(self, value, **kwargs):  # type: ignore[no-untyped-def]
        if value is not None and len(value) != len(set(value)):
            raise ValidationError("Variants must be unique")


class HistoryViewSchema(Schema):
    date = fields.String(required=True)
    day_summary = fields.List(fields.Nested(SummaryItemSchema), required=True)
    slot_summaries = fields.List(fields.Nested(SlotSummarySchema), required=True)
    pending = fields.List(fields.Nested(BetSchema), required=True)
    refreshed_at = fields.DateTime(required=True)


class DashboardViewSchema(Schema):
    variant = fields.Function(lambda v: v.variant.value)
    history = fields.Nested(HistoryViewSchema, allow_none=True)
    current = fields.Nested(CurrentSlotPreviewSchema, allow_none=True)


class ResultsQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    date = fields.String(required=False, load_default=None)
    variant = fields.String(required=False, load_default="jodi", validate=validate.OneOf(VARIANTS))
    # Viewer "test time": only slots closed by this time of day are shown.
    at = fields.String(required=False, load_default=None, validate=validate.Regexp(r"^([01][0-9]|2[0-3]):[0-5][0-9]$"))


class ResultRowSchema(Schema):
    slot = fields.Nested(TimeSlotSchema, required=True)
    numbers = fields.List(fields.String(), required=True)

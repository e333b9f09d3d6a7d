"""Allow-list schemas for the two extraction pipelines.

See :mod:`stayscout.projector` for how a schema is applied.
"""

from __future__ import annotations

from stayscout.projector import Schema

SEARCH_RESULT_SCHEMA: Schema = {
    "listing": {
        "id": True,
        "name": True,
        "title": True,
        "coordinate": True,
        "structuredContent": {
            "mapCategoryInfo": {"body": True},
            "mapSecondaryLine": {"body": True},
            "primaryLine": {"body": True},
            "secondaryLine": {"body": True},
        },
    },
    "avgRatingA11yLabel": True,
    "listingParamOverrides": True,
    "structuredDisplayPrice": {
        "primaryLine": {"accessibilityLabel": True},
        "secondaryLine": {"accessibilityLabel": True},
        "explanationData": {
            "title": True,
            "priceDetails": {
                "items": {
                    "description": True,
                    "priceString": True,
                },
            },
        },
    },
}

# Keyed by ``sectionId``; sections with any other id are dropped.
LISTING_SECTION_SCHEMAS: dict[str, Schema] = {
    "LOCATION_DEFAULT": {
        "lat": True,
        "lng": True,
        "subtitle": True,
        "title": True,
    },
    "POLICIES_DEFAULT": {
        "title": True,
        "houseRulesSections": {
            "title": True,
            "items": {"title": True},
        },
    },
    "HIGHLIGHTS_DEFAULT": {
        "highlights": {"title": True},
    },
    "DESCRIPTION_DEFAULT": {
        "htmlDescription": {"htmlText": True},
    },
    "AMENITIES_DEFAULT": {
        "title": True,
        "seeAllAmenitiesGroups": {
            "title": True,
            "amenities": {"title": True},
        },
    },
}

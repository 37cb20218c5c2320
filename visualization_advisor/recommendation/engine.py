"""
Recommendation Engine - rule-based chart recommendations.

Turns a data profile and field classification into a ranked list of chart
recommendations, each with a confidence score, a reason and draft encodings.

Architecture:
    Every rule is evaluated independently and appends to one candidate list,
    in this order:
    1. Strongest linear relationship → scatter ('point')
    2. Quantitative field with outliers + category → box plot
    3. Temporal trend → line; with a category also a normalized stacked area
    4. Dense data with two measures → binned heatmap ('rect')
    5. Skewed measure → histogram ('bar' with binned x)
    6. Low-cardinality category + measure → bar; long labels → horizontal bar;
       second category → grouped bar
    7. Very low-cardinality category + measure → pie ('arc')
    8. Grouping-named category + measure → treemap
    Candidates are sorted by confidence (stable, so rule order breaks ties)
    and truncated. Every recommendation gets a tooltip.

Design Decisions:
    - Identifier-like numeric fields never serve as measures
    - Categorical means nominal or ordinal; hierarchical fields are excluded
    - An empty, single-row or degenerate profile yields no recommendations
"""

import logging
from typing import Dict, List, Any, Optional, Sequence

from visualization_advisor.core import constants
from visualization_advisor.core.config import AdvisorConfig
from visualization_advisor.profiler.name_heuristics import is_grouping_name
from visualization_advisor.profiler.profile_result import (
    DataProfile,
    Density,
    FieldType,
    Relationship,
    RelationshipType,
)
from visualization_advisor.recommendation.models import EncodingSpec, Recommendation
from visualization_advisor.recommendation.tooltips import ensure_tooltip

logger = logging.getLogger(__name__)


class FieldPools:
    """Fields grouped by the role they can play in a recommendation."""

    def __init__(self, field_types: Dict[str, FieldType], profile: DataProfile):
        self.field_types = field_types
        self.quantitative = [f for f, t in field_types.items() if t == FieldType.QUANTITATIVE]
        self.categorical = [f for f, t in field_types.items() if t.is_categorical]
        self.measures = [
            f for f in self.quantitative
            if not (f in profile.field_profiles and profile.field_profiles[f].is_identifier)
        ]

    def category_type(self, field_name: str) -> FieldType:
        return self.field_types.get(field_name, FieldType.NOMINAL)


class RecommendationEngine:
    """
    Produce ranked chart recommendations from a profile.

    Example:
        >>> engine = RecommendationEngine()
        >>> recommendations = engine.recommend(records, field_types, profile)
        >>> [r.chart_type for r in recommendations]
        ['point', 'rect']
    """

    def __init__(self, config: Optional[AdvisorConfig] = None):
        self.config = config or AdvisorConfig()

    def recommend(
        self,
        record_set: Sequence[Dict[str, Any]],
        field_types: Dict[str, FieldType],
        profile: DataProfile,
    ) -> List[Recommendation]:
        """
        Recommend charts for a record sample.

        Args:
            record_set: Record sample the profile was built from
            field_types: Inferred field types
            profile: DataProfile of the sample

        Returns:
            At most max_recommendations recommendations, confidence descending
        """
        if len(record_set) < constants.MIN_ROWS_FOR_PROFILE or profile.is_degenerate:
            logger.debug("No recommendations for an empty, single-row or degenerate sample")
            return []

        pools = FieldPools(field_types, profile)
        candidates: List[Recommendation] = []

        candidates.extend(self._scatter_rule(pools, profile))
        candidates.extend(self._outlier_rule(pools, profile))
        candidates.extend(self._trend_rules(pools, profile))
        candidates.extend(self._heatmap_rule(pools, profile))
        candidates.extend(self._histogram_rule(pools, profile))
        candidates.extend(self._comparison_rules(pools, profile))
        candidates.extend(self._part_to_whole_rule(pools, profile))
        candidates.extend(self._treemap_rule(pools, profile))

        for recommendation in candidates:
            ensure_tooltip(recommendation, field_types, self.config.max_tooltip_fields)

        # sorted() is stable, so rule order breaks confidence ties
        ranked = sorted(candidates, key=lambda rec: rec.confidence, reverse=True)
        ranked = ranked[:self.config.max_recommendations]

        logger.debug(
            f"{len(candidates)} candidate recommendations, returning "
            + ", ".join(f"{rec.chart_type}({rec.confidence:.2f})" for rec in ranked)
        )
        return ranked

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _scatter_rule(self, pools: FieldPools, profile: DataProfile) -> List[Recommendation]:
        strongest = self._strongest_linear_relationship(profile, pools)
        if strongest is None:
            return []

        field_x, field_y = self._in_field_order(strongest.fields, pools)
        encodings: Dict[str, Any] = {
            "x": EncodingSpec(field=field_x, type=FieldType.QUANTITATIVE, scale={"zero": False}),
            "y": EncodingSpec(field=field_y, type=FieldType.QUANTITATIVE, scale={"zero": False}),
        }
        if pools.categorical:
            category = pools.categorical[0]
            encodings["color"] = EncodingSpec(field=category, type=pools.category_type(category))
        third = next((f for f in pools.measures if f not in (field_x, field_y)), None)
        if third is not None:
            encodings["size"] = EncodingSpec(field=third, type=FieldType.QUANTITATIVE)

        direction = "positive" if strongest.coefficient > 0 else "negative"
        return [Recommendation(
            chart_type="point",
            confidence=constants.CONFIDENCE_SCATTER,
            reason=(
                f'Strong {direction} correlation (r = {strongest.coefficient:.2f}) between '
                f'"{field_x}" and "{field_y}". Scatter plots show how two measures move together.'
            ),
            suggested_encodings=encodings,
        )]

    def _outlier_rule(self, pools: FieldPools, profile: DataProfile) -> List[Recommendation]:
        if not pools.categorical:
            return []
        measure = next(
            (f for f in pools.measures if profile.field_profiles[f].has_outliers), None
        )
        if measure is None:
            return []

        category = pools.categorical[0]
        outliers = profile.field_profiles[measure].distribution.outlier_count
        category_type = pools.category_type(category)
        return [Recommendation(
            chart_type="boxplot",
            confidence=constants.CONFIDENCE_OUTLIER_BOXPLOT,
            reason=(
                f'Field "{measure}" has {outliers} outlier{"s" if outliers != 1 else ""} '
                f'outside the Tukey fences. Box plots per "{category}" show spread and outliers.'
            ),
            suggested_encodings={
                "x": EncodingSpec(field=category, type=category_type),
                "y": EncodingSpec(field=measure, type=FieldType.QUANTITATIVE),
                "color": EncodingSpec(field=category, type=category_type),
            },
        )]

    def _trend_rules(self, pools: FieldPools, profile: DataProfile) -> List[Recommendation]:
        if not profile.patterns.has_trend or not profile.patterns.trend_pairs:
            return []

        time_field, measure = profile.patterns.trend_pairs[0]
        category = pools.categorical[0] if pools.categorical else None

        line_encodings: Dict[str, Any] = {
            "x": EncodingSpec(field=time_field, type=FieldType.TEMPORAL),
            "y": EncodingSpec(field=measure, type=FieldType.QUANTITATIVE),
        }
        if category is not None:
            line_encodings["color"] = EncodingSpec(field=category, type=pools.category_type(category))

        recommendations = [Recommendation(
            chart_type="line",
            confidence=constants.CONFIDENCE_TREND_LINE,
            reason=(
                f'"{measure}" drifts over "{time_field}". '
                f'Line charts are excellent for showing trends over time.'
            ),
            suggested_encodings=line_encodings,
        )]

        if category is not None:
            recommendations.append(Recommendation(
                chart_type="area",
                confidence=constants.CONFIDENCE_STACKED_AREA,
                reason=(
                    f'Time series with categories in "{category}". '
                    f'A normalized stacked area chart shows how each share of "{measure}" changes over time.'
                ),
                suggested_encodings={
                    "x": EncodingSpec(field=time_field, type=FieldType.TEMPORAL),
                    "y": EncodingSpec(
                        field=measure,
                        type=FieldType.QUANTITATIVE,
                        aggregate="sum",
                        stack="normalize",
                    ),
                    "color": EncodingSpec(field=category, type=pools.category_type(category)),
                },
            ))

        return recommendations

    def _heatmap_rule(self, pools: FieldPools, profile: DataProfile) -> List[Recommendation]:
        if profile.patterns.density != Density.DENSE or len(pools.measures) < 2:
            return []

        field_x, field_y = pools.measures[0], pools.measures[1]
        return [Recommendation(
            chart_type="rect",
            confidence=constants.CONFIDENCE_HEATMAP,
            reason=(
                f'Dense data in "{field_x}" and "{field_y}". '
                f'A binned heatmap shows where values concentrate without overplotting.'
            ),
            suggested_encodings={
                "x": EncodingSpec(field=field_x, type=FieldType.QUANTITATIVE,
                                  bin={"maxbins": constants.DEFAULT_MAX_BINS}),
                "y": EncodingSpec(field=field_y, type=FieldType.QUANTITATIVE,
                                  bin={"maxbins": constants.DEFAULT_MAX_BINS}),
                "color": EncodingSpec(type=FieldType.QUANTITATIVE, aggregate="count"),
            },
        )]

    def _histogram_rule(self, pools: FieldPools, profile: DataProfile) -> List[Recommendation]:
        for measure in pools.measures:
            distribution = profile.field_profiles[measure].distribution
            if distribution is None or abs(distribution.skewness) <= self.config.skewness_threshold:
                continue
            return [Recommendation(
                chart_type="bar",
                confidence=constants.CONFIDENCE_HISTOGRAM,
                reason=(
                    f'Field "{measure}" is skewed (skewness {distribution.skewness:.2f}). '
                    f'A histogram shows the shape of its distribution.'
                ),
                suggested_encodings={
                    "x": EncodingSpec(field=measure, type=FieldType.QUANTITATIVE,
                                      bin={"maxbins": constants.DEFAULT_MAX_BINS}),
                    "y": EncodingSpec(type=FieldType.QUANTITATIVE, aggregate="count"),
                },
            )]
        return []

    def _comparison_rules(self, pools: FieldPools, profile: DataProfile) -> List[Recommendation]:
        if not pools.measures:
            return []
        category = self._first_category(pools, profile, self.config.max_comparison_categories)
        if category is None:
            return []

        measure = pools.measures[0]
        category_profile = profile.field_profiles[category]
        category_type = pools.category_type(category)

        recommendations = [Recommendation(
            chart_type="bar",
            confidence=constants.CONFIDENCE_BAR,
            reason=(
                f'Found categorical field "{category}" with {category_profile.unique_count} categories '
                f'and measure "{measure}". Bar charts excel at comparing values across categories.'
            ),
            suggested_encodings={
                "x": EncodingSpec(field=category, type=category_type),
                "y": EncodingSpec(field=measure, type=FieldType.QUANTITATIVE),
            },
        )]

        if category_profile.max_label_length > self.config.long_label_length:
            recommendations.append(Recommendation(
                chart_type="bar",
                confidence=constants.CONFIDENCE_HORIZONTAL_BAR,
                reason=(
                    f'Category names in "{category}" are long (up to '
                    f'{category_profile.max_label_length} characters). Horizontal bars keep labels readable.'
                ),
                suggested_encodings={
                    "x": EncodingSpec(field=measure, type=FieldType.QUANTITATIVE),
                    "y": EncodingSpec(field=category, type=category_type, sort="-x"),
                },
            ))

        second = next((f for f in pools.categorical if f != category), None)
        if second is not None:
            second_type = pools.category_type(second)
            recommendations.append(Recommendation(
                chart_type="bar",
                confidence=constants.CONFIDENCE_GROUPED_BAR,
                reason=(
                    f'Second categorical field "{second}" found. '
                    f'Grouped bars compare "{measure}" across both "{category}" and "{second}".'
                ),
                suggested_encodings={
                    "x": EncodingSpec(field=category, type=category_type),
                    "y": EncodingSpec(field=measure, type=FieldType.QUANTITATIVE),
                    "color": EncodingSpec(field=second, type=second_type),
                    "xOffset": EncodingSpec(field=second, type=second_type),
                },
            ))

        return recommendations

    def _part_to_whole_rule(self, pools: FieldPools, profile: DataProfile) -> List[Recommendation]:
        if not pools.measures:
            return []
        category = self._first_category(pools, profile, self.config.max_part_to_whole_categories)
        if category is None:
            return []

        measure = pools.measures[0]
        segments = profile.field_profiles[category].unique_count
        return [Recommendation(
            chart_type="arc",
            confidence=constants.CONFIDENCE_ARC,
            reason=(
                f'Found categorical field "{category}" with {segments} categories. Pie/donut charts '
                f'work well for showing proportions when there are not too many segments.'
            ),
            suggested_encodings={
                "theta": EncodingSpec(field=measure, type=FieldType.QUANTITATIVE, aggregate="sum"),
                "color": EncodingSpec(field=category, type=pools.category_type(category)),
            },
        )]

    def _treemap_rule(self, pools: FieldPools, profile: DataProfile) -> List[Recommendation]:
        if not pools.measures:
            return []
        category = next((f for f in pools.categorical if is_grouping_name(f)), None)
        if category is None:
            return []

        measure = pools.measures[0]
        return [Recommendation(
            chart_type="treemap",
            confidence=constants.CONFIDENCE_TREEMAP,
            reason=(
                f'Field "{category}" groups the records. '
                f'Treemaps show how "{measure}" is divided between groups by area.'
            ),
            suggested_encodings={
                "size": EncodingSpec(field=measure, type=FieldType.QUANTITATIVE),
                "color": EncodingSpec(field=category, type=pools.category_type(category)),
            },
        )]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _strongest_linear_relationship(self, profile: DataProfile, pools: FieldPools) -> Optional[Relationship]:
        strongest: Optional[Relationship] = None
        for relationship in profile.relationships.values():
            if not all(f in pools.measures for f in relationship.fields):
                continue
            if relationship.type != RelationshipType.LINEAR:
                continue
            if relationship.strength <= self.config.strong_relationship_threshold:
                continue
            if strongest is None or relationship.strength > strongest.strength:
                strongest = relationship
        return strongest

    @staticmethod
    def _in_field_order(pair, pools: FieldPools):
        order = list(pools.field_types)
        first, second = pair
        if first in order and second in order and order.index(second) < order.index(first):
            return second, first
        return first, second

    @staticmethod
    def _first_category(pools: FieldPools, profile: DataProfile, max_categories: int) -> Optional[str]:
        for category in pools.categorical:
            unique_count = profile.field_profiles[category].unique_count
            if 0 < unique_count <= max_categories:
                return category
        return None

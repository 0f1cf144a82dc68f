"""Streamlit dashboard for browsing lab-tested products."""
from __future__ import annotations

import streamlit as st

from lab_catalog.catalog_service import BrowseResult, CatalogService
from lab_catalog.config import Settings
from lab_catalog.facets import (
    AGGREGATE_VERDICT_OPTIONS,
    CATEGORIES,
    CONTAMINANT_VERDICT_OPTIONS,
    VERDICT_OPTIONS,
    category_slug,
)
from lab_catalog.filters import AGGREGATE_FACETS, RANGE_DEFAULTS
from lab_catalog.ranges import NUTRIENT_RANGES, nutrient_field
from lab_catalog.repository import ReportRepository
from lab_catalog.state import (
    BrowseState,
    ChangeCategory,
    ClearFilters,
    SetRange,
    ToggleContaminant,
    ToggleSort,
    ToggleValue,
    reduce,
)
from lab_catalog.utils import titleize

PAGE_SIZE = 12


@st.cache_resource
def get_service() -> CatalogService:
    try:
        settings = Settings.load()
        repository = ReportRepository(settings.db_path)
    except ValueError:
        repository = ReportRepository()
    return CatalogService(repository)


def dispatch(action) -> None:
    st.session_state.browse = reduce(st.session_state.browse, action)
    if isinstance(action, (ChangeCategory, ClearFilters)):
        # Widget keys carry the generation so every control renders unchecked.
        st.session_state.generation += 1


def widget_key(*parts: str) -> str:
    return ":".join((str(st.session_state.generation),) + parts)


def option_label(option: str) -> str:
    return "No Result" if option == "not_assigned" else titleize(option)


def checkbox_group(facet: str, options, selected) -> None:
    for option in options:
        st.checkbox(
            option_label(option),
            value=option in selected,
            key=widget_key(facet, option),
            on_change=dispatch,
            args=(ToggleValue(facet, option),),
        )


def render_sidebar(state: BrowseState, result: BrowseResult) -> None:
    facets = result.facets
    filters = state.filters
    sidebar = st.sidebar

    badge = f" ({result.active_filters})" if result.active_filters else ""
    sidebar.header(f"Filters{badge}")
    sidebar.button("Clear All", on_click=dispatch, args=(ClearFilters(),))

    if facets.has_sorting:
        with sidebar.expander("Sort By", expanded=True):
            for field_name in facets.sorting_fields:
                arrow = ""
                if state.sort and state.sort.field == field_name:
                    arrow = " ↓" if state.sort.direction == "desc" else " ↑"
                st.button(
                    f"{titleize(field_name)}{arrow}",
                    key=widget_key("sort", field_name),
                    on_click=dispatch,
                    args=(ToggleSort(field_name),),
                )

    if facets.has_verdict:
        with sidebar.expander("Overall Verdict", expanded=True):
            checkbox_group("verdict", VERDICT_OPTIONS, filters.selected("verdict"))

    if facets.has_nutrients and facets.nutrients:
        with sidebar.expander("Nutrients Per Serving", expanded=True):
            for nutrient in facets.nutrients:
                facet = nutrient_field(nutrient)
                st.caption(titleize(facet))
                for bucket in NUTRIENT_RANGES[nutrient]:
                    st.checkbox(
                        bucket.label,
                        value=bucket.label in filters.selected(facet),
                        key=widget_key(facet, bucket.label),
                        on_change=dispatch,
                        args=(ToggleValue(facet, bucket.label),),
                    )

    if facets.has_price or facets.has_price_per_serving:
        with sidebar.expander("Price"):
            for facet, enabled, step in (
                ("price", facets.has_price, 1.0),
                ("price_per_serving", facets.has_price_per_serving, 0.1),
            ):
                if not enabled:
                    continue
                low_default, high_default = RANGE_DEFAULTS[facet]
                low, high = filters.ranges.get(facet, RANGE_DEFAULTS[facet])
                st.caption(f"{titleize(facet)} (₹)")
                new_low = st.number_input(
                    "Min", min_value=low_default, max_value=high_default, value=float(low),
                    step=step, key=widget_key(facet, "min"),
                )
                new_high = st.number_input(
                    "Max", min_value=low_default, max_value=high_default, value=float(high),
                    step=step, key=widget_key(facet, "max"),
                )
                if (new_low, new_high) != (low, high):
                    dispatch(SetRange(facet, new_low, new_high))
                    st.rerun()

    if facets.has_contaminants and result.contaminants:
        with sidebar.expander("Contaminant Tests"):
            for contaminant in result.contaminants:
                st.caption(titleize(contaminant))
                if facets.contaminants_from_data:
                    selected = filters.extra_contaminants.get(contaminant, ())
                    for option in CONTAMINANT_VERDICT_OPTIONS:
                        st.checkbox(
                            option_label(option),
                            value=option in selected,
                            key=widget_key("extra", contaminant, option),
                            on_change=dispatch,
                            args=(ToggleContaminant(contaminant, option),),
                        )
                else:
                    checkbox_group(contaminant, CONTAMINANT_VERDICT_OPTIONS, filters.selected(contaminant))

    if facets.has_subjective:
        with sidebar.expander("Subjective Analysis"):
            for aspect in facets.subjective:
                st.caption(titleize(aspect))
                checkbox_group(aspect, VERDICT_OPTIONS, filters.selected(aspect))

    if facets.has_food_filters:
        with sidebar.expander("Food Tests"):
            for facet in AGGREGATE_FACETS:
                st.caption(titleize(facet))
                checkbox_group(facet, AGGREGATE_VERDICT_OPTIONS, filters.selected(facet))


def render_products(result: BrowseResult) -> None:
    if not result.products:
        st.info("No products found. Try adjusting your filters.")
        return

    st.caption(f"Showing {result.shown} of {result.total} products")
    page_count = max(1, -(-result.shown // PAGE_SIZE))
    page = st.number_input("Page", min_value=1, max_value=page_count, value=1, step=1)
    start = (page - 1) * PAGE_SIZE
    for product in result.products[start : start + PAGE_SIZE]:
        with st.container():
            st.markdown(f"### {product.product_name}")
            c1, c2, c3 = st.columns(3)
            c1.metric("Verdict", option_label(product.verdict) if product.verdict else "N/A")
            c2.metric("Price", product.display_price() or "N/A")
            c3.metric("Per Serving", product.display_price_per_serving() or "N/A")
            st.caption(f"{product.company} · {product.category}")


def main() -> None:
    st.set_page_config(page_title="Lab Catalog", layout="wide")
    service = get_service()

    if "browse" not in st.session_state:
        st.session_state.browse = BrowseState()
        st.session_state.generation = 0

    category = st.sidebar.selectbox("Category", options=CATEGORIES, index=len(CATEGORIES) - 1)
    slug = "all" if category == "All Products" else category_slug(category)
    if st.session_state.browse.category != slug:
        dispatch(ChangeCategory(slug))

    state: BrowseState = st.session_state.browse
    result = service.browse(state.category, state.filters, state.sort)
    st.title(category)
    render_sidebar(state, result)
    render_products(result)


if __name__ == "__main__":
    main()

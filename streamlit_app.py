from __future__ import annotations

import streamlit as st

from shootings.charts import (
    build_borough_map,
    format_trend_summary,
    plot_category_breakdown,
    plot_monthly_pattern,
    plot_survival_ratio,
    plot_yearly_trend,
)
from shootings.pipeline import ReportArtifacts, run_pipeline


st.set_page_config(
    page_title="NYPD Shooting Incident Report",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown(
    "<style>.main { padding-top: 1.5rem; }</style>",
    unsafe_allow_html=True,
)


@st.cache_resource(show_spinner=False)
def get_artifacts() -> ReportArtifacts:
    return run_pipeline()


def render_kpis(artifacts: ReportArtifacts) -> None:
    by_year = artifacts.views["by_year"]
    cols = st.columns(3)
    cols[0].metric("Incidents", f"{int(by_year['count'].sum()):,}")
    cols[1].metric("Years covered", f"{by_year['year'].min()}–{by_year['year'].max()}")
    cols[2].metric("Rows skipped (bad date)", f"{artifacts.skipped_rows:,}")


def main():
    artifacts = get_artifacts()
    views = artifacts.views

    with st.sidebar:
        st.header("Data Quality")
        st.caption("Rows with a blank demographic field vs rows with an explicit unknown code.")
        st.dataframe(artifacts.overlap.crosstab)
        st.metric("Co-occurrence", f"{artifacts.overlap.rate:.1%}")
        if artifacts.overlap.flagged:
            st.warning("Blank and unknown codes overlap more than expected.")
        st.caption("Data: NYPD Shooting Incident Data (Historic), NYC Open Data.")

    overview_tab, breakdown_tab = st.tabs(["Trend", "Breakdowns"])

    with overview_tab:
        st.title("NYPD Shooting Incidents")
        render_kpis(artifacts)

        st.plotly_chart(
            plot_yearly_trend(views["by_year"], artifacts.predictions),
            use_container_width=True,
        )
        if artifacts.trend is not None:
            st.subheader("Linear trend")
            st.write(format_trend_summary(artifacts.trend.summary()))
            st.dataframe(artifacts.predictions.round(1), hide_index=True)
        for message in artifacts.errors:
            st.error(message)

    with breakdown_tab:
        left, right = st.columns(2)
        with left:
            st.plotly_chart(plot_survival_ratio(views["by_year_murder"]), use_container_width=True)
            st.plotly_chart(
                plot_category_breakdown(views["by_year_perp_sex"], "perp_sex", "Perpetrator Sex by Year"),
                use_container_width=True,
            )
        with right:
            st.plotly_chart(plot_monthly_pattern(views["by_month_murder"]), use_container_width=True)
            st.plotly_chart(
                plot_category_breakdown(views["by_year_victim_sex"], "victim_sex", "Victim Sex by Year"),
                use_container_width=True,
            )

        st.plotly_chart(
            plot_category_breakdown(views["by_year_borough"], "borough", "Incidents by Borough"),
            use_container_width=True,
        )
        st.pydeck_chart(build_borough_map(views["by_borough"]), use_container_width=True)
        st.dataframe(views["by_season"], hide_index=True)


main()

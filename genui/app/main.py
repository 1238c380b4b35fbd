"""Streamlit entry point for the GenUI workspace.

Launch with ``python . ui``. With no ``goal`` query parameter the landing
view is shown; otherwise the workspace for the decoded query is generated,
evaluated and drawn.
"""

from __future__ import annotations

import logging

import streamlit as st
from dotenv import load_dotenv

from genui.app import (
    CONDITION_LABELS,
    FACTOR_DISPLAY,
    INTENT_LABELS,
    WorkspaceQuery,
    factor_display_score,
    humanize,
    score_color,
)
from genui.config import EnvVar, get_available_llm_providers, get_environment
from genui.core import setup_logging
from genui.evaluation import EvaluationSummary, InterfaceEvaluator
from genui.experiment import ConditionResult, compare_conditions, format_percentage, run_all_conditions
from genui.layout import Specification
from genui.llm.generator import InterfaceGenerator
from genui.render import render_specification
from genui.render.draw import draw_view
from genui.schema import PERSONA_DESCRIPTIONS, Condition, Intent, Persona

load_dotenv()
setup_logging(get_environment(EnvVar.GENUI_LOG_LEVEL))
logger = logging.getLogger("genui.app")


@st.cache_resource(show_spinner=False)
def get_pipeline() -> tuple[InterfaceGenerator, InterfaceEvaluator]:
    return InterfaceGenerator(), InterfaceEvaluator()


# =============================================================================
# Landing View
# =============================================================================


def landing_view() -> None:
    st.title("GenUI")
    st.caption("Generative interfaces for personalized AI writing collaboration")

    if not get_available_llm_providers():
        st.warning(
            "No LLM API key configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY; "
            "until then workspaces use fallback layouts."
        )

    persona = st.radio(
        "How do you think?",
        list(Persona),
        format_func=lambda p: "{} · {}".format(*PERSONA_DESCRIPTIONS[p]),
    )
    intent = st.radio(
        "What are you doing?",
        list(Intent),
        horizontal=True,
        format_func=lambda i: "{} ({})".format(*INTENT_LABELS[i]),
    )
    goal = st.text_area(
        "Your goal",
        placeholder="E.g., Draft a CHI paper introduction on human-AI collaboration...",
    )
    comparison = st.toggle(
        "Experiment Mode",
        help="Compare baseline chat vs. generic vs. personalized GenUI",
    )

    if st.button("Generate Workspace", type="primary", disabled=not goal.strip()):
        query = WorkspaceQuery(persona=persona, goal=goal.strip(), intent=intent, comparison=comparison)
        st.query_params.from_dict(query.to_query_params())
        st.rerun()


# =============================================================================
# Workspace View
# =============================================================================


def load_results(query: WorkspaceQuery, force: bool = False) -> list[ConditionResult]:
    """Generate and evaluate once per query; widget views are kept with them.

    Each generation renders its views under a fresh key namespace, so
    Streamlit element state never carries over between conditions or runs.
    """
    state_key = tuple(sorted(query.to_query_params().items()))
    if not force and st.session_state.get("query_key") == state_key:
        return st.session_state["results"]

    generator, evaluator = get_pipeline()
    goal, profile = query.task_goal(), query.user_profile()

    if query.comparison:
        with st.spinner("Running experiment across all three conditions..."):
            results = run_all_conditions(goal, profile, generator=generator, evaluator=evaluator)
    else:
        condition = Condition.PERSONALIZED_GENUI
        with st.spinner(f"Generating adaptive workspace for {profile.persona}..."):
            spec = generator.generate(goal, profile, condition)
        with st.spinner("Running LLM-as-judge evaluation..."):
            evaluation = evaluator.evaluate(spec, goal, profile, condition)
        results = [ConditionResult(condition, spec, evaluation)]

    logger.info(f"Generated {len(results)} workspace(s) for {profile.persona} ({goal.intent})")
    generation = st.session_state.get("generation", 0) + 1
    st.session_state["generation"] = generation
    st.session_state["query_key"] = state_key
    st.session_state["results"] = results
    st.session_state["views"] = {
        r.condition: render_specification(
            r.specification, namespace=f"{r.condition.value}-{generation}"
        )
        for r in results
    }
    return results


def condition_picker(results: list[ConditionResult]) -> Condition:
    scores = {r.condition: r.overall_score for r in results}
    return st.radio(
        "Condition",
        [r.condition for r in results],
        index=len(results) - 1,
        horizontal=True,
        format_func=lambda c: f"{CONDITION_LABELS[c][0]} · {scores[c]:.0f}",
        captions=[CONDITION_LABELS[r.condition][1] for r in results],
    )


def experiment_stats(results: list[ConditionResult]) -> None:
    comparison = compare_conditions(results)
    with st.container(border=True):
        st.markdown("**Experiment Summary**")
        cells = st.columns(len(results))
        for cell, result in zip(cells, results):
            cell.metric(CONDITION_LABELS[result.condition][0], f"{result.overall_score:.0f}")
        st.markdown(
            f"Personalized vs Baseline: "
            f"**{format_percentage(comparison.improvements['personalizedVsBaseline'])}**  \n"
            f"Personalized vs Generic: "
            f"**{format_percentage(comparison.improvements['personalizedVsGeneric'])}**"
        )
        st.caption("Single-run comparison. Full study requires N≥30 for statistical power.")


def rationale_panel(spec: Specification) -> None:
    with st.expander("Why This Layout?", expanded=True):
        st.write(spec.rationale or "No rationale provided.")
        context = spec.retrieved_context
        if context is None:
            return
        if context.persona_traits:
            st.markdown("**Retrieved Persona Traits:** " + " · ".join(context.persona_traits[:4]))
        if context.matched_patterns:
            st.markdown("**Matched UI Patterns:** " + " · ".join(context.matched_patterns))
        if context.behavior_insights:
            st.markdown(f"**Behavior Insight:** _{context.behavior_insights[0]}_")


def evaluation_panel(summary: EvaluationSummary) -> None:
    with st.container(border=True):
        cells = st.columns(len(FACTOR_DISPLAY) + 1)
        for cell, (factor, label, source, _) in zip(cells, FACTOR_DISPLAY):
            score = factor_display_score(summary, factor)
            cell.metric(label, f"{score:.0f}", help=source)
            cell.progress(int(max(0, min(100, score))))
        cells[-1].metric("Overall", f"{summary.overall_score:.0f}")

        if summary.detailed and st.toggle("Show sub-criteria"):
            detail_cells = st.columns(len(FACTOR_DISPLAY))
            detailed = summary.detailed.model_dump(by_alias=True)
            for cell, (factor, _, _, _) in zip(detail_cells, FACTOR_DISPLAY):
                for sub, value in detailed[factor]["details"].items():
                    cell.caption(f"{humanize(sub)}: {value:.0f}")

        color = score_color(summary.overall_score)
        st.markdown(f"**Feedback:** :{color}[{summary.feedback}]")
        strengths_col, improvements_col = st.columns(2)
        if summary.strengths:
            strengths_col.markdown("**Strengths**\n" + "\n".join(f"- {s}" for s in summary.strengths))
        if summary.improvements:
            improvements_col.markdown(
                "**Improvements**\n" + "\n".join(f"- {s}" for s in summary.improvements)
            )


def workspace_view(query: WorkspaceQuery) -> None:
    back_col, title_col, regen_col = st.columns([1, 8, 2])
    if back_col.button("←", help="Go back"):
        st.query_params.clear()
        st.rerun()
    title_col.markdown(
        f"### {'Experiment Mode' if query.comparison else 'Generative Workspace'}\n"
        f"{query.goal} · `{query.persona.value}`"
    )
    force = regen_col.button("Regenerate")

    results = load_results(query, force=force)
    by_condition = {r.condition: r for r in results}

    condition = condition_picker(results) if query.comparison else results[0].condition
    active = by_condition[condition]

    if query.comparison:
        experiment_stats(results)

    rationale_panel(active.specification)
    draw_view(st.session_state["views"][condition])
    evaluation_panel(active.evaluation)


def main() -> None:
    st.set_page_config(page_title="GenUI Workspace", layout="wide")
    query = WorkspaceQuery.from_query_params(st.query_params.to_dict())
    if query.has_goal:
        workspace_view(query)
    else:
        landing_view()


main()

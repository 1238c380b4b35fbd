"""CLI entry point for genui.

This module acts as the central entry point for the project's CLI tools:
generating and evaluating workspaces, running the three-condition comparison
and the batch experiment, launching the UI and inspecting configuration.
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

from genui.config import (
    EnvVar,
    get_available_llm_providers,
    get_default_model,
    get_environment,
    get_environment_info,
    list_environment_variables,
)
from genui.core import get_logger, setup_logging
from genui.schema import CONDITION_ORDER, Condition, Intent, Persona

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")

APP_SCRIPT = Path(__file__).resolve().parent / "genui" / "app" / "main.py"


# =============================================================================
# Shared Helpers
# =============================================================================


def _build_pipeline(model: str | None = None, temperature: float = 0.7):
    """Create the generator and evaluator used by the pipeline commands."""
    from genui.evaluation import EvaluatorConfig, InterfaceEvaluator
    from genui.llm import GeneratorConfig, InterfaceGenerator

    generator = InterfaceGenerator(config=GeneratorConfig(model=model, temperature=temperature))
    evaluator = InterfaceEvaluator(config=EvaluatorConfig(model=model))
    return generator, evaluator


def _check_model(model: str | None) -> bool:
    """Log an error and the known models if ``model`` is not recognized."""
    from genui.llm import LLMModel

    if model is None or LLMModel.by_name(model) is not None:
        return True

    logger.error(f"Unknown model: {model}")
    logger.info("Available models:")
    for m in LLMModel:
        logger.info(f"  {m.spec.name}")
    return False


def _add_task_arguments(parser: argparse.ArgumentParser, goal_required: bool = True) -> None:
    """Arguments describing the task and the user."""
    if goal_required:
        parser.add_argument("goal", type=str, help="Task goal in natural language")
    else:
        parser.add_argument("--goal", "-g", type=str, required=True, help="Task goal")
    parser.add_argument(
        "--intent",
        "-i",
        type=str,
        default=Intent.WRITE.value,
        choices=[i.value for i in Intent],
        help="Task intent (default: write)",
    )
    parser.add_argument(
        "--persona",
        "-p",
        type=str,
        default=Persona.VISUAL.value,
        choices=[p.value for p in Persona],
        help="User persona (default: VisualWriter)",
    )
    parser.add_argument(
        "--model",
        "-m",
        type=str,
        default=None,
        help="LLM model name (e.g. gpt-4o, claude-sonnet-4-5)",
    )


def _task_inputs(args: argparse.Namespace):
    from genui.schema import TaskGoal, UserProfile

    goal = TaskGoal(description=args.goal, intent=args.intent)
    profile = UserProfile(persona=args.persona)
    return goal, profile


def _write_or_print(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        logger.info(f"Saved to {output}")
    else:
        print(text)


def _parse(parser: argparse.ArgumentParser, argv: list[str]) -> argparse.Namespace | None:
    """Parse arguments, returning None when argparse exits (e.g. --help)."""
    try:
        return parser.parse_args(argv)
    except SystemExit as e:
        if e.code:
            raise
        return None


# =============================================================================
# Generate Command
# =============================================================================


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    from genui.render import format_layout_tree

    if not _check_model(args.model):
        return 1

    generator, _ = _build_pipeline(args.model, args.temperature)
    goal, profile = _task_inputs(args)

    logger.info(f"Generating {args.condition} workspace for: {args.goal}")
    output = generator.generate_with_details(goal, profile, args.condition)
    spec = output.specification

    if args.format == "tree":
        result_text = format_layout_tree(spec.layout)
    elif args.format == "all":
        result_text = (
            f"## Text Tree\n{format_layout_tree(spec.layout)}\n\n"
            f"## Rationale\n{spec.rationale or ''}\n\n"
            f"## JSON\n```json\n{spec.to_json()}\n```"
        )
    else:
        result_text = spec.to_json()

    _write_or_print(result_text, args.output)

    if output.used_fallback:
        logger.warning(f"Fallback layout used: {output.failure_reason}")
    else:
        logger.info(f"Stats: {output.total_tokens} tokens, model={output.model}")
    return 0


def handle_generate_command(argv: list[str]) -> int:
    """Handle generate-specific commands."""
    parser = argparse.ArgumentParser(
        prog="python . generate",
        description="Generate a workspace layout for a task goal",
    )
    _add_task_arguments(parser)
    parser.add_argument(
        "--condition",
        "-c",
        type=str,
        default=Condition.PERSONALIZED_GENUI.value,
        choices=[c.value for c in Condition],
        help="Experimental condition (default: personalized-genui)",
    )
    parser.add_argument(
        "--temperature",
        type=float,
        default=0.7,
        help="LLM temperature (default: 0.7)",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default="json",
        choices=["json", "tree", "all"],
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )

    if not argv:
        parser.print_help()
        return 1

    args = _parse(parser, argv)
    if args is None:
        return 0
    return cmd_generate(args)


# =============================================================================
# Evaluate Command
# =============================================================================


def cmd_evaluate(args: argparse.Namespace) -> int:
    """Handle the evaluate command."""
    from genui.layout import validate_specification

    if not _check_model(args.model):
        return 1

    try:
        data = json.loads(args.spec.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read specification {args.spec}: {e}")
        return 1

    validated = validate_specification(data)
    if not validated.ok:
        logger.error(f"Invalid specification: {validated.reason}")
        return 1

    _, evaluator = _build_pipeline(args.model)
    goal, profile = _task_inputs(args)
    summary = evaluator.evaluate(validated.value, goal, profile, args.condition)
    print(json.dumps(summary.to_dict(), indent=2))
    return 0


def handle_evaluate_command(argv: list[str]) -> int:
    """Handle evaluate-specific commands."""
    parser = argparse.ArgumentParser(
        prog="python . evaluate",
        description="Score a layout specification with the 5-factor rubric",
    )
    parser.add_argument("spec", type=Path, help="Specification JSON file")
    _add_task_arguments(parser, goal_required=False)
    parser.add_argument(
        "--condition",
        "-c",
        type=str,
        default=Condition.PERSONALIZED_GENUI.value,
        choices=[c.value for c in Condition],
        help="Condition the layout was generated for",
    )

    if not argv:
        parser.print_help()
        return 1

    args = _parse(parser, argv)
    if args is None:
        return 0
    return cmd_evaluate(args)


# =============================================================================
# Compare Command
# =============================================================================


def cmd_compare(args: argparse.Namespace) -> int:
    """Handle the compare command."""
    from genui.experiment import compare_conditions, format_percentage, run_all_conditions

    if not _check_model(args.model):
        return 1

    generator, evaluator = _build_pipeline(args.model)
    goal, profile = _task_inputs(args)

    logger.info(f"Running {len(CONDITION_ORDER)} conditions for: {args.goal}")
    results = run_all_conditions(goal, profile, generator=generator, evaluator=evaluator)
    comparison = compare_conditions(results)

    if args.json:
        payload = {
            "results": [r.to_dict() for r in results],
            "comparison": comparison.to_dict(),
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"{'Condition':<22}{'Overall':>8}{'Load':>6}{'Clarity':>9}{'Fit':>6}")
    for result in results:
        e = result.evaluation
        print(
            f"{result.condition.value:<22}{e.overall_score:>8.0f}"
            f"{e.cognitive_load:>6.0f}{e.clarity:>9.0f}{e.personalization_fit:>6.0f}"
        )
    print("\nImprovements:")
    for label, value in comparison.improvements.items():
        print(f"  {label}: {format_percentage(value)}")
    return 0


def handle_compare_command(argv: list[str]) -> int:
    """Handle compare-specific commands."""
    parser = argparse.ArgumentParser(
        prog="python . compare",
        description="Generate and evaluate all three conditions for one task",
    )
    _add_task_arguments(parser)
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    if not argv:
        parser.print_help()
        return 1

    args = _parse(parser, argv)
    if args is None:
        return 0
    return cmd_compare(args)


# =============================================================================
# Experiment Command
# =============================================================================


def _print_summary(summary) -> None:
    from genui.experiment import format_percentage

    print("\nSUMMARY STATISTICS")
    print("=" * 60)
    for condition, stats in summary.conditions.items():
        scores = ", ".join(f"{s:.0f}" for s in stats.scores)
        print(f"\n{condition.value}:")
        print(f"  Average Overall Score: {stats.mean:.1f} (sd {stats.std_dev:.1f}, n={stats.n})")
        print(f"  Individual Scores: {scores}")

    print("\nIMPROVEMENTS:")
    for label, value in summary.improvements.items():
        effect = summary.effect_sizes[label]
        print(
            f"  {label}: {format_percentage(value)} "
            f"(d = {effect.cohens_d}, {effect.interpretation})"
        )

    print("\nFactor Averages by Condition:")
    print(json.dumps({c.value: f for c, f in summary.factor_averages.items()}, indent=2))
    print(f"\n{summary.summary}")


def cmd_experiment(args: argparse.Namespace) -> int:
    """Handle the experiment command."""
    from genui.experiment import (
        load_results,
        run_experiment,
        save_results,
        summarize_experiment,
    )

    if args.summarize:
        try:
            records = load_results(args.summarize)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Cannot read results {args.summarize}: {e}")
            return 1
        _print_summary(summarize_experiment(records))
        return 0

    if not _check_model(args.model):
        return 1

    generator, evaluator = _build_pipeline(args.model)

    def report(record) -> None:
        logger.info(
            f"{record.persona} / {record.condition.value}: "
            f"overall {record.evaluation.overall_score:.0f}"
        )

    records = run_experiment(generator=generator, evaluator=evaluator, on_record=report)
    _print_summary(summarize_experiment(records))
    path = save_results(records, args.output)
    print(f"\nFull results saved to: {path}")
    return 0


def handle_experiment_command(argv: list[str]) -> int:
    """Handle experiment-specific commands."""
    parser = argparse.ArgumentParser(
        prog="python . experiment",
        description="Run the built-in study cases under all three conditions",
    )
    parser.add_argument(
        "--model",
        "-m",
        type=str,
        default=None,
        help="LLM model name",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Results file (default: GENUI_RESULTS_PATH)",
    )
    parser.add_argument(
        "--summarize",
        "-s",
        type=Path,
        default=None,
        help="Summarize an existing results file instead of running",
    )

    args = _parse(parser, argv)
    if args is None:
        return 0
    return cmd_experiment(args)


# =============================================================================
# UI Command
# =============================================================================


def cmd_ui(extra_args: list[str]) -> int:
    """Launch the Streamlit UI.

    Usage:
        python . ui                  # Port from GENUI_UI_PORT (default 8501)
        python . ui --port 8600      # Custom port
        python . ui -- --theme.base dark   # Extra streamlit flags after --
    """
    port = get_environment(EnvVar.GENUI_UI_PORT)
    passthrough: list[str] = []

    args = list(extra_args)
    if "--" in args:
        split = args.index("--")
        args, passthrough = args[:split], args[split + 1 :]
    if "--port" in args:
        index = args.index("--port")
        if index + 1 >= len(args):
            logger.error("--port requires a value")
            return 1
        port = int(args[index + 1])

    cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(APP_SCRIPT),
        "--server.port",
        str(port),
        *passthrough,
    ]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# Info Commands
# =============================================================================


def cmd_personas(_args: list[str]) -> int:
    """List persona records from the knowledge tables."""
    from genui.knowledge import load_knowledge_base

    knowledge = load_knowledge_base()
    for persona in knowledge.personas:
        print(f"{persona.name} ({persona.id})")
        print(f"  Style: {persona.cognitive_style}")
        print(f"  {persona.description}")
        print(f"  Tools: {', '.join(persona.preferences.primary_tools)}")
    counts = ", ".join(f"{n} {table}" for table, n in knowledge.summary().items())
    logger.info(f"Knowledge tables: {counts}")
    return 0


def cmd_models(_args: list[str]) -> int:
    """List known LLM models."""
    from genui.llm import LLMModel, LLMProviderType

    available = get_available_llm_providers()
    default = get_default_model()
    print("Available LLM Models:")
    for provider in LLMProviderType:
        key_tag = "" if provider.value in available else " (no API key)"
        print(f"\n  {provider.value}{key_tag}:")
        for model in LLMModel.list_by_provider(provider):
            marker = " *" if model.spec.name == default else ""
            print(f"    {model.spec.name + marker:<22}{model.spec.description}")
    print("\n  * default")
    return 0


def _display_value(var: EnvVar) -> str:
    info = get_environment_info(var)
    value = get_environment(var)
    if value is None:
        return "(not set)"
    if "KEY" in info.name:
        return "****" + str(value)[-4:]
    return str(value)


def cmd_env(argv: list[str]) -> int:
    """Show environment configuration."""
    parser = argparse.ArgumentParser(
        prog="python . env",
        description="Show environment configuration",
    )
    parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        choices=["llm", "data", "app"],
        help="Only show one category",
    )
    args = _parse(parser, argv)
    if args is None:
        return 0

    print("Environment Report")
    current = None
    for var in list_environment_variables(args.category):
        info = get_environment_info(var)
        if info.category != current:
            current = info.category
            print(f"\n[{current}]")
        print(f"  {info.name:<22} {_display_value(var):<28} {info.description}")

    providers = get_available_llm_providers()
    print(f"\nProviders: {', '.join(providers) if providers else 'none (fallback layouts only)'}")
    print(f"Model: {get_default_model()}")
    return 0


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . test                # Run all tests
        python . test --unit         # Run only unit tests
        python . test --integration  # Run pipeline and CLI tests
        python . test --llm          # Run tests against a real LLM API
        python . test -k "render"    # Run tests matching pattern

    Test Tiers:
        unit        - Fast tests with no I/O or external services
        integration - End-to-end pipeline tests with the mock backend
        llm         - Tests requiring an API key (auto-skipped without one)
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--llm": ["-m", "llm"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Workspaces ===")
    print("  generate   Generate a workspace layout for a task goal")
    print("  evaluate   Score a specification file with the rubric")
    print("  compare    Run all three conditions for one task")
    print("  experiment Run the built-in study cases and save results")
    print("  ui         Launch the Streamlit workspace UI")
    print("\n=== Information ===")
    print("  personas   List personas from the knowledge tables")
    print("  models     List available LLM models")
    print("  env        Show environment configuration")
    print("\n=== Development ===")
    print("  test       Run pytest (--unit, --integration, --llm)")
    print("\nExamples:")
    print("  python . generate 'Help me brainstorm thesis ideas' -i brainstorm -f tree")
    print("  python . generate 'Draft a CHI introduction' -p LinearWriter -c generic-genui")
    print("  python . evaluate layout.json -g 'Draft a CHI introduction'")
    print("  python . compare 'Outline a literature review' -p ResearchWriter -i research")
    print("  python . experiment -o results.json")
    print("  python . experiment --summarize results.json")
    print("  python . ui --port 8600")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "generate": lambda: handle_generate_command(rest_args),
        "evaluate": lambda: handle_evaluate_command(rest_args),
        "compare": lambda: handle_compare_command(rest_args),
        "experiment": lambda: handle_experiment_command(rest_args),
        "ui": lambda: cmd_ui(rest_args),
        "personas": lambda: cmd_personas(rest_args),
        "models": lambda: cmd_models(rest_args),
        "env": lambda: cmd_env(rest_args),
        "test": lambda: cmd_test(rest_args),
    }

    if command in commands:
        setup_logging(get_environment(EnvVar.GENUI_LOG_LEVEL))
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Crosscheck Orchestrator
Main entry point for running a single crosscheck from the command line.

Usage:
    python main.py --question "What is a permanent establishment?"
    python main.py --question "..." --jurisdiction "Brazil" --facts-file facts.txt
    python main.py --check-keys          # Check API key configuration
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

from config.config import CrosscheckConfig, load_config, validate_api_keys
from crosscheck.boundary import shape_request
from crosscheck.errors import CrosscheckError
from crosscheck.models.schemas import CrosscheckResult
from crosscheck.orchestrator import CrosscheckOrchestrator


def check_api_keys(config: CrosscheckConfig) -> bool:
    """Check and report API key status."""
    print("\n" + "=" * 60)
    print("API Key Status")
    print("=" * 60)

    status = validate_api_keys(config)

    for provider, configured in status.items():
        status_str = "[OK] Configured" if configured else "[X] Missing"
        print(f"  {provider.upper()}: {status_str}")

    print(f"\n  OpenRouter models: {', '.join(config.openrouter_models)}")
    print(f"  Gemini enabled: {config.gemini_enabled}")
    print(f"  Synthesis model: {config.synthesis.model_id}")

    if not any(status.values()):
        print("\nWarning: No API keys are configured.")
        print("Create a .env file with your API keys:")
        print("  OPENAI_API_KEY=your_key")
        print("  OPENROUTER_API_KEY=your_key")
        print("  GEMINI_API_KEY=your_key")
        return False

    return True


def print_summary(result: CrosscheckResult):
    """Print a human-readable summary of a run."""
    print("\n" + "=" * 60)
    print("CROSSCHECK COMPLETE" if result.ok else "CROSSCHECK FAILED")
    print("=" * 60)
    print(f"  Attempted: {len(result.meta.attempted)}")
    print(f"  Succeeded: {', '.join(c.label for c in result.meta.succeeded) or 'none'}")
    print(f"  Failed: {', '.join(c.label for c in result.meta.failed) or 'none'}")
    print(f"  Runtime: {result.meta.runtime_ms}ms")
    print(f"  Confidence: {result.consensus.confidence.value}")
    print("-" * 60)
    print(result.consensus.answer)

    for title, items in (
        ("Caveats", result.consensus.caveats),
        ("Follow-ups", result.consensus.followups),
        ("Disagreements", result.consensus.disagreements),
    ):
        if items:
            print(f"\n{title}:")
            for item in items:
                print(f"  - {item}")


async def run_crosscheck(
    body: dict,
    config: CrosscheckConfig,
    output_path: Optional[str] = None
) -> CrosscheckResult:
    """
    Run a single crosscheck and optionally save the JSON result.

    Args:
        body: Raw request fields, shaped like the HTTP body
        config: Loaded configuration
        output_path: Path to save the result JSON

    Returns:
        The crosscheck result
    """
    orchestrator = CrosscheckOrchestrator(config=config, verbose=True)
    result = await orchestrator.run(shape_request(body, config))

    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(result.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
        print(f"\nResult saved to {path}")

    return result


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Crosscheck Orchestrator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --question "What is a permanent establishment?"
    python main.py --question "..." --timeout-ms 30000 --output results/pe.json
    python main.py --check-keys              # Check API key configuration
        """
    )

    parser.add_argument('--question', type=str, default=None,
                       help='Question to cross-check')
    parser.add_argument('--jurisdiction', type=str, default=None,
                       help='Jurisdiction focus')
    parser.add_argument('--facts', type=str, default=None,
                       help='Known facts, free text')
    parser.add_argument('--facts-file', type=str, default=None,
                       help='Read known facts from a text file')
    parser.add_argument('--constraints', type=str, default=None,
                       help='Tone/format guidance')
    parser.add_argument('--timeout-ms', type=int, default=None,
                       help='Per-provider deadline in ms (clamped to 8000-120000)')
    parser.add_argument('--max-tokens', type=int, default=None,
                       help='Per-provider completion budget (clamped to 200-2000)')
    parser.add_argument('--output', type=str, default=None,
                       help='Path to save the result JSON')
    parser.add_argument('--json', action='store_true',
                       help='Print the full result JSON instead of a summary')
    parser.add_argument('--check-keys', action='store_true',
                       help='Check API key configuration')

    args = parser.parse_args()
    config = load_config()

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s"
    )

    if args.check_keys:
        check_api_keys(config)
        return

    if not args.question:
        parser.error("--question is required unless --check-keys is given")

    facts = args.facts
    if args.facts_file:
        facts = Path(args.facts_file).read_text(encoding='utf-8')

    body = {
        "question": args.question,
        "jurisdiction": args.jurisdiction,
        "facts": facts,
        "constraints": args.constraints,
        "timeout_ms": args.timeout_ms,
        "max_tokens": args.max_tokens,
    }

    try:
        result = asyncio.run(run_crosscheck(body, config, args.output))
    except CrosscheckError as e:
        parser.exit(2, f"Error: {e}\n")

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        print_summary(result)


if __name__ == "__main__":
    main()

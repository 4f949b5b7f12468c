from crosscheck.models.schemas import ProviderId, ProviderOutput, ProviderStatus
from crosscheck.stages.fallback import pick_best, score_text


def _output(text=None, status=ProviderStatus.OK, model="m", error=None) -> ProviderOutput:
    return ProviderOutput(
        provider=ProviderId.OPENROUTER,
        model=model,
        status=status,
        elapsed_ms=10,
        text=text,
        error=error,
    )


def test_returns_none_without_candidates() -> None:
    assert pick_best([]) is None
    assert pick_best([_output(error="boom", status=ProviderStatus.ERROR)]) is None


def test_short_texts_do_not_qualify() -> None:
    assert pick_best([_output("x" * 50), _output("   " + "y" * 49 + "   ")]) is None


def test_failed_outputs_are_ignored_even_with_text() -> None:
    failed = _output("z" * 500, status=ProviderStatus.TIMEOUT)
    ok = _output("a" * 60, model="ok")

    assert pick_best([failed, ok]).model == "ok"


def test_longest_text_wins() -> None:
    short = _output("a" * 100, model="short")
    long = _output("b" * 300, model="long")

    assert pick_best([short, long]).model == "long"


def test_low_information_phrases_are_penalised() -> None:
    refusal = _output("I cannot give tax advice. " + "c" * 500, model="refusal")
    plain = _output("d" * 200, model="plain")

    assert score_text(refusal.text) == len(refusal.text) - 400
    assert pick_best([refusal, plain]).model == "plain"


def test_penalty_matches_case_insensitively() -> None:
    text = "No Information is available about this. " + "e" * 100
    assert score_text(text) == len(text) - 400


def test_ties_keep_the_first_output() -> None:
    first = _output("f" * 100, model="first")
    second = _output("g" * 100, model="second")

    assert pick_best([first, second]).model == "first"

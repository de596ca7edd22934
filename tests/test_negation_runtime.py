import pytest

from negation.negation_runtime import ExecutionResult, ScriptRunner


async def run_negation(src: str, runner: ScriptRunner | None = None, **kwargs):
    runner = runner or ScriptRunner()
    return await runner.handle_script(src, **kwargs)


def assert_ok(res, expected=None):
    assert res.status == 'success', res.error_message
    if expected is not None:
        assert res.value == expected


def assert_error(res, contains: str | None = None):
    assert res.status == 'error', f"expected error, got success: {res.value!r}"
    if contains is not None:
        assert contains in (res.error_message or ""), f"error did not contain {contains!r}: {res.error_message!r}"


@pytest.mark.asyncio
async def test_success_reports_output_variables_and_effects():
    res = await run_negation("!-\n$x?42\n_greet?hi\n#$x\n#_greet\n-!")
    assert_ok(res, "42hi")
    assert res.statements == 4
    assert res.variables == {'boolean': {}, 'number': {'x': 42}, 'string': {'greet': 'hi'}}
    assert [e['topics'] for e in res.side_effects] == [['stdout'], ['stdout']]
    assert [e['message'] for e in res.side_effects] == ["42", "hi"]
    assert res.format_error() == ""


@pytest.mark.asyncio
async def test_error_message_has_kind_location_and_context():
    res = await run_negation("!-\n$x?1\n$y?1%\n-!\n")
    assert_error(res, "FormatError:")
    msg = res.error_message
    assert "> 3 | $y?1%" in msg
    assert "^" in msg
    assert res.error_token == {'line': 3, 'col': 5, 'char': '%'}
    assert res.format_error().startswith("Error on line 3, col 5: FormatError:")

    stderr_effects = [e for e in res.side_effects if e.get('topics') == ['stderr']]
    assert stderr_effects and stderr_effects[-1]['message'] == msg


@pytest.mark.asyncio
async def test_output_before_error_is_reported():
    res = await run_negation("!-\n#_partial\n#!nope\n-!")
    assert_error(res, "LookupError:")
    assert res.value == "partial"


@pytest.mark.asyncio
async def test_error_result_counts_completed_statements():
    res = await run_negation("!-\n$x?1\n#$x\n\n#_ok\n$y?1%\n-!\n")
    assert_error(res, "FormatError:")
    assert res.statements == 3
    assert res.value == "1ok"


@pytest.mark.asyncio
async def test_error_context_uses_the_same_line_breaks_as_the_cursor():
    res = await run_negation("!-\n_s?a\x0cb\n$y?1%\n-!\n")
    assert_error(res, "FormatError:")
    assert res.error_token['line'] == 3
    assert "> 3 | $y?1%" in res.error_message

    res = await run_negation("!-\r\n_s?a b\r\n#$missing\r\n-!\r\n")
    assert_error(res, "LookupError:")
    assert "> 3 | #$missing" in res.error_message


@pytest.mark.asyncio
async def test_signature_and_end_of_input_errors():
    res = await run_negation("#_hi\n")
    assert_error(res, "SignatureError:")
    res = await run_negation("!-\n#_hi\n")
    assert_error(res, "UnexpectedEndOfInput:")
    assert res.value == "hi"


@pytest.mark.asyncio
async def test_tables_persist_across_unframed_calls():
    runner = ScriptRunner()
    assert_ok(await run_negation("$x?7\n", runner, framed=False), "")
    assert_ok(await run_negation("#$x\n", runner, framed=False), "7")
    runner.reset()
    assert_error(await run_negation("#$x\n", runner, framed=False), "LookupError")


@pytest.mark.asyncio
async def test_handle_locator_reads_files(tmp_path):
    script = tmp_path / "hello.neg"
    script.write_text("!-\n_w?hello\n#_w\n-!\n", encoding="utf-8")

    runner = ScriptRunner()
    assert_ok(await runner.handle_locator(str(script)), "hello")
    assert_ok(await runner.handle_locator(f"file://{script}"), "hello")

    runner.source_dir = str(tmp_path)
    assert_ok(await runner.handle_locator("hello.neg"), "hello")
    assert_ok(await runner.handle_locator("file://./hello.neg"), "hello")


@pytest.mark.asyncio
async def test_handle_locator_missing_file(tmp_path):
    runner = ScriptRunner()
    runner.source_dir = str(tmp_path)
    res = await runner.handle_locator("missing.neg")
    assert_error(res, "IOError:")
    assert res.side_effects[-1]['topics'] == ['stderr']


@pytest.mark.asyncio
async def test_handle_locator_fetches_http(monkeypatch):
    calls = []

    class DummyResp:
        status_code = 200
        text = "!-\n$n?12\n#$n\n-!\n"

    class DummyAsyncClient:
        def __init__(self, *args, **kwargs):
            pass
        async def __aenter__(self):
            return self
        async def __aexit__(self, exc_type, exc, tb):
            return False
        async def request(self, method, url, headers=None):
            calls.append((method, url))
            return DummyResp()

    import negation.negation_http as negation_http_mod
    monkeypatch.setattr(negation_http_mod, "httpx", type("X", (), {"AsyncClient": DummyAsyncClient}))

    runner = ScriptRunner(http_config={"retries": 0})
    res = await runner.handle_locator("http://example/prog.neg")
    assert_ok(res, "12")
    assert calls == [("GET", "http://example/prog.neg")]


def test_format_error_without_token():
    res = ExecutionResult(status='error', error_message="IOError: boom")
    assert res.format_error() == "IOError: boom"
    res = ExecutionResult(status='error', error_message="Error on line 2: x", error_token={'line': 2, 'col': None})
    assert res.format_error() == "Error on line 2: x"

import asyncio
import aiohttp

import pytest
from pytest import raises

from tally import CounterUI, RunLoopFailure, RunState, ServeConfig, StaleHandleError, build
from tally.server._auth import TOKEN_COOKIE

from . import assert_marks_dirty

def test_initial_counter_is_zero():
    ui = CounterUI()
    assert ui.get_counter() == 0
    assert ui.display.text == '0'
    assert ui.state is RunState.IDLE

def test_set_counter_rerenders_display():
    ui = CounterUI()
    before = ui.time_step
    with assert_marks_dirty(ui.display):
        ui.set_counter(41)
    assert ui.get_counter() == 41
    assert ui.display.text == '41'
    assert ui.time_step == before + 1
    assert ui.render_poll_response(before)['elements'] == {
        ui.display.id: {'id': ui.display.id, 'subtree': {'text': '41'}},
    }

def test_set_counter_rejects_non_ints():
    ui = CounterUI()
    for bad in ['1', 1.0, True, None]:
        with raises(TypeError):
            ui.set_counter(bad)  # type: ignore
    assert ui.get_counter() == 0

def test_press_without_callback_does_nothing():
    ui = CounterUI()
    before = ui.time_step
    ui.invoke_button_pressed()
    assert ui.get_counter() == 0
    assert ui.time_step == before

def test_on_button_pressed_replaces_previous_callback():
    ui = CounterUI()
    calls = []
    ui.on_button_pressed(lambda: calls.append('first'))
    @ui.on_button_pressed
    def second():
        calls.append('second')

    ui.invoke_button_pressed()
    assert calls == ['second']

def test_callback_errors_propagate():
    ui = CounterUI()
    @ui.on_button_pressed
    def boom():
        raise StaleHandleError('gone')

    with raises(StaleHandleError):
        ui.invoke_button_pressed()

def test_button_text():
    ui = CounterUI(button_text='more')
    assert ui.button.text == 'more'

@pytest.mark.asyncio
async def test_run_async_until_closed():
    ui = CounterUI(config=ServeConfig(open_browser=False))
    task = asyncio.create_task(ui.run_async())
    await asyncio.sleep(0)
    assert ui.state is RunState.RUNNING

    ui.close()
    await asyncio.wait_for(task, timeout=10)
    assert ui.state is RunState.RUNNING

@pytest.mark.asyncio
async def test_run_async_twice_fails():
    ui = CounterUI(config=ServeConfig(open_browser=False))
    task = asyncio.create_task(ui.run_async())
    await asyncio.sleep(0)

    with raises(RunLoopFailure):
        await ui.run_async()

    ui.close()
    await asyncio.wait_for(task, timeout=10)

def test_close_before_run_is_noop():
    CounterUI().close()

def test_run_wraps_startup_errors(monkeypatch):
    import tally.counter

    async def broken_serve_async(*args, **kwargs):
        raise OSError('address already in use')
    monkeypatch.setattr(tally.counter, 'serve_async', broken_serve_async)

    ui = CounterUI(config=ServeConfig(open_browser=False))
    with raises(RunLoopFailure) as excinfo:
        ui.run()
    assert isinstance(excinfo.value.__cause__, OSError)
    assert ui.state is RunState.RUNNING

def test_presses_after_run_loop_ends_still_count():
    ui = build(ServeConfig(open_browser=False))
    async def run_then_close():
        task = asyncio.ensure_future(ui.run_async())
        await asyncio.sleep(0)
        ui.close()
        await task
    asyncio.run(run_then_close())

    ui.invoke_button_pressed()
    ui.invoke_button_pressed()
    assert ui.get_counter() == 2
    assert ui.display.text == '2'

async def _log_in(session: aiohttp.ClientSession, url: str) -> None:
    for _ in range(200):
        try:
            async with session.get(url, allow_redirects=False) as response:
                assert response.status == 302
                return
        except aiohttp.ClientConnectionError:
            await asyncio.sleep(0.05)
    raise AssertionError(f'server never came up at {url}')

@pytest.mark.asyncio
async def test_fatal_error_from_browser_click_ends_run_async():
    config = ServeConfig(open_browser=False).resolved()
    ui = CounterUI(config=config)
    @ui.on_button_pressed
    def stale():
        raise StaleHandleError('gone')

    task = asyncio.create_task(ui.run_async())
    async with aiohttp.ClientSession(cookie_jar=aiohttp.CookieJar(unsafe=True)) as session:
        await _log_in(session, config.auth_url)
        assert session.cookie_jar.filter_cookies(config.auth_url)[TOKEN_COOKIE].value == config.token
        base = f'http://{config.host}:{config.port}'
        async with session.post(f'{base}/interaction', json={'target': ui.button.id, 'type': 'click'}) as response:
            assert response.status == 500

    with raises(StaleHandleError):
        await asyncio.wait_for(task, timeout=10)
    assert ui.get_counter() == 0

@pytest.mark.asyncio
async def test_run_inside_running_loop_fails_without_starting():
    ui = CounterUI(config=ServeConfig(open_browser=False))
    with raises(RunLoopFailure):
        ui.run()
    assert ui.state is RunState.IDLE

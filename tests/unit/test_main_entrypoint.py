import runpy

import uvicorn


def test_module_entrypoint_runs_storefront_app(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("PORT", "8123")
    monkeypatch.delenv("UVICORN_RELOAD", raising=False)

    runpy.run_module("storefront.__main__", run_name="__main__")

    assert len(calls) == 1
    app, kwargs = calls[0]
    assert app == "storefront.asgi:app"
    assert kwargs["port"] == 8123
    assert kwargs["reload"] is False
    # X-Forwarded-For n'est lu que par le middleware de l'application
    assert kwargs["proxy_headers"] is False


def test_module_docstring_describes_the_storefront():
    import storefront.__main__ as entrypoint

    assert "python -m storefront" in entrypoint.__doc__
    assert "generate_hash" in entrypoint.__doc__

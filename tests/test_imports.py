def test_import_geodaily_package() -> None:
    import importlib

    module = importlib.import_module("geodaily")
    assert module is not None
    assert module.__version__


def test_import_rng_no_side_effects() -> None:
    from geodaily.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)


def test_import_cli_entry_point() -> None:
    from geodaily.main import main

    assert callable(main)

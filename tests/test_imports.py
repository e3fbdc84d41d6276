def test_import_cardbattle_package() -> None:
    import importlib

    module = importlib.import_module("cardbattle")
    assert module.__version__


def test_import_services_no_side_effects() -> None:
    from cardbattle.services import BattleService, Catalog

    assert BattleService is not None
    assert Catalog is not None

"""Console-driven UI loops for the card battle engine."""
from __future__ import annotations

import secrets
from typing import List, Literal

from cardbattle.core.config import EngineConfig, load_config
from cardbattle.core.rng import RNG
from cardbattle.data.save_store import SaveSlotStore
from cardbattle.domain.progression import PlayerProgress, equip_card, exp_needed, unequip_card, unequipped_cards
from cardbattle.services.battle_service import BattleService
from cardbattle.services.catalog import Catalog
from cardbattle.services.controllers import BattleAction, BattleController
from cardbattle.services.errors import BattleSetupError
from cardbattle.services.save_service import SaveService

from .render import render_battle_view, render_events, render_heading, render_menu

MenuAction = Literal["new_game", "continue", "quit"]
_MAX_RANDOM_SEED = 2**31 - 1


def main(config: EngineConfig | None = None) -> None:
    """Start the interactive CLI session."""
    config = config or load_config()
    catalog = Catalog.from_definitions()
    catalog.validate_references()
    store = SaveSlotStore()
    print("=== Card Battle ===")
    while True:
        action = _main_menu_loop()
        if action == "quit":
            break
        slot = _prompt_slot(store, allow_empty=action == "new_game")
        if slot is None:
            continue
        save_service = SaveService(store, slot)
        if action == "new_game":
            progress = PlayerProgress.new_game(catalog.starter_deck(), config)
            save_service.save_progress(progress)
        else:
            loaded = save_service.load_progress()
            if loaded is None:
                print("That save could not be loaded.")
                continue
            progress = loaded
        rng = RNG(_prompt_seed())
        _run_game_menu(catalog, save_service, config, progress, rng)
    print("Goodbye!")


def _main_menu_loop() -> MenuAction:
    while True:
        render_menu("Main Menu", ["New Game", "Continue", "Quit"])
        choice = input("Select an option: ").strip()
        if choice == "1":
            return "new_game"
        if choice == "2":
            return "continue"
        if choice == "3":
            return "quit"
        print("Invalid selection. Please enter 1, 2 or 3.")


def _prompt_slot(store: SaveSlotStore, *, allow_empty: bool) -> int | None:
    labels: List[str] = []
    for summary in store.summaries():
        if summary.is_empty:
            labels.append(f"Slot {summary.slot}: empty")
        elif summary.is_corrupt:
            labels.append(f"Slot {summary.slot}: unreadable")
        else:
            labels.append(f"Slot {summary.slot}: level {summary.level}, {summary.gold} gold ({summary.saved_at})")
    render_menu("Save Slots", labels)
    raw = input("Choose a slot (blank to cancel): ").strip()
    if not raw:
        return None
    try:
        slot = int(raw)
    except ValueError:
        print("Please enter a number.")
        return None
    if not 1 <= slot <= store.slot_count:
        print("No such slot.")
        return None
    if not allow_empty and not store.slot_exists(slot):
        print("That slot is empty.")
        return None
    return slot


def _prompt_seed() -> int:
    while True:
        raw_value = input("Enter seed (blank for random): ").strip()
        if not raw_value:
            return secrets.randbelow(_MAX_RANDOM_SEED)
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def _prompt_index(prompt: str, count: int) -> int | None:
    raw = input(prompt).strip()
    if not raw:
        return None
    try:
        index = int(raw) - 1
    except ValueError:
        print("Please enter a number.")
        return None
    if 0 <= index < count:
        return index
    print(f"Please enter a value between 1 and {count}.")
    return None


def _run_game_menu(
    catalog: Catalog, save_service: SaveService, config: EngineConfig, progress: PlayerProgress, rng: RNG
) -> None:
    battle_service = BattleService(catalog, progress_store=save_service, config=config)
    controller = BattleController(battle_service)
    while True:
        render_menu("Adventure", ["Fight", "Manage Deck", "View Progress", "Save and Return"])
        choice = input("Select an option: ").strip()
        if choice == "1":
            _choose_and_fight(catalog, battle_service, controller, progress, rng)
        elif choice == "2":
            _manage_deck(catalog, progress)
            save_service.save_progress(progress)
        elif choice == "3":
            _render_progress(catalog, config, progress)
        elif choice == "4":
            save_service.save_progress(progress)
            return
        else:
            print("Invalid selection.")


def _choose_and_fight(
    catalog: Catalog,
    battle_service: BattleService,
    controller: BattleController,
    progress: PlayerProgress,
    rng: RNG,
) -> None:
    levels = [level for level in catalog.all_levels() if level.id in progress.unlocked_levels]
    render_menu("Levels", [f"{level.name} - {level.description}" for level in levels])
    index = _prompt_index("Choose a level (blank to cancel): ", len(levels))
    if index is None:
        return
    if not progress.equipped_cards:
        print("Your deck is empty. Equip some cards first.")
        return
    try:
        ctx, events = battle_service.start_battle(levels[index].id, progress, rng)
    except BattleSetupError as exc:
        print(f"Cannot start battle: {exc}")
        return
    render_events(events)
    events = controller.run_enemy_turns(ctx)
    render_events(events)
    while not controller.is_battle_over(ctx):
        render_battle_view(controller.get_battle_view(ctx))
        action = _prompt_battle_action(len(ctx.deck.hand))
        render_events(controller.apply_player_action(ctx, action))


def _prompt_battle_action(hand_size: int) -> BattleAction:
    while True:
        raw = input("Card # to play, d<#> to discard, e to end turn: ").strip().lower()
        if raw == "e":
            return BattleAction(action_type="end_turn")
        if raw.startswith("d"):
            try:
                return BattleAction(action_type="discard", hand_index=int(raw[1:]) - 1)
            except ValueError:
                print("Use d followed by a card number, e.g. d2.")
                continue
        try:
            return BattleAction(action_type="play", hand_index=int(raw) - 1)
        except ValueError:
            print(f"Enter a number between 1 and {hand_size}, d<#> or e.")


def _manage_deck(catalog: Catalog, progress: PlayerProgress) -> None:
    while True:
        render_heading(f"Deck ({len(progress.equipped_cards)} cards)")
        for idx, card_id in enumerate(progress.equipped_cards, start=1):
            print(f"{idx}. {_card_name(catalog, card_id)}")
        spare = unequipped_cards(progress)
        print("Spare cards:")
        for idx, card_id in enumerate(spare, start=1):
            print(f"  s{idx}. {_card_name(catalog, card_id)}")
        raw = input("Number to unequip, s<#> to equip, blank to finish: ").strip().lower()
        if not raw:
            return
        if raw.startswith("s"):
            index = _parse_index(raw[1:], len(spare))
            if index is not None:
                equip_card(progress, spare[index])
            continue
        index = _parse_index(raw, len(progress.equipped_cards))
        if index is not None:
            unequip_card(progress, progress.equipped_cards[index])


def _parse_index(raw: str, count: int) -> int | None:
    try:
        index = int(raw) - 1
    except ValueError:
        print("Please enter a number.")
        return None
    if not 0 <= index < count:
        print("Invalid selection.")
        return None
    return index


def _card_name(catalog: Catalog, card_id: str) -> str:
    card = catalog.get_card_by_id(card_id)
    return card.name if card is not None else card_id


def _render_progress(catalog: Catalog, config: EngineConfig, progress: PlayerProgress) -> None:
    render_heading("Progress")
    print(f"Level {progress.level} ({progress.experience}/{exp_needed(progress.level, config)} exp)")
    print(f"Health {progress.max_health}, mana {progress.max_mana}, gold {progress.gold}")
    print(f"Levels unlocked: {len(progress.unlocked_levels)}/{catalog.get_levels_count()}")
    stats = progress.stats
    print(
        f"Battles won {stats.total_battles_won}, damage dealt {stats.total_damage_dealt}, "
        f"healing {stats.total_healing}, cards played {stats.total_cards_played}"
    )
    unlocked = [a.name for a in catalog.all_achievements() if a.id in progress.achievements]
    print(f"Achievements: {', '.join(unlocked) if unlocked else 'none yet'}")

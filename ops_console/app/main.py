from __future__ import annotations

from ops_console.app.config import ConsoleSettings
from ops_console.app.console import ListingConsole
from ops_console.app.infrastructure.logging.logger import configure_logging, get_logger, log_event
from ops_console.app.preferences import ViewStatePersistence, build_preference_store
from ops_console.app.screens import SCREENS, ScreenConfig
from ops_console.app.view_engine import RecordViewEngine
from ops_console.clients.ops_api_sdk import HttpClient, PreferencesClient, RecordsClient

logger = get_logger(__name__)


def choose_screen() -> ScreenConfig | None:
    slugs = list(SCREENS)
    while True:
        print("\nOperations console")
        for index, slug in enumerate(slugs, start=1):
            print(f"{index}. {SCREENS[slug].title}")
        print("0. Exit")
        selected = input("screen: ").strip().lower()
        if selected in {"0", "q", ""}:
            return None
        if selected.isdigit() and 1 <= int(selected) <= len(slugs):
            return SCREENS[slugs[int(selected) - 1]]
        if selected in SCREENS:
            return SCREENS[selected]
        print(f"[menu] Unknown screen: {selected}")


def build_console(settings: ConsoleSettings, screen: ScreenConfig, http_client: HttpClient) -> ListingConsole:
    records = RecordsClient(http_client, access_token=settings.OPS_ACCESS_TOKEN)
    store = build_preference_store(
        settings.OPS_PREFERENCES_BACKEND,
        settings.preferences_path,
        client=PreferencesClient(http_client, access_token=settings.OPS_ACCESS_TOKEN),
    )
    engine = RecordViewEngine(
        screen,
        persistence=ViewStatePersistence(store, screen.name),
        page_size=settings.OPS_PAGE_SIZE,
        registry=screen.build_registry(currency_symbol=settings.OPS_CURRENCY_SYMBOL),
    )
    return ListingConsole(
        engine,
        fetch_records=lambda: records.fetch_records(screen.resource),
        fetch_locations=records.fetch_cities,
    )


def run_cli(settings: ConsoleSettings | None = None) -> None:
    settings = settings or ConsoleSettings()
    configure_logging(settings.OPS_LOG_LEVEL)
    http_client = HttpClient(settings=settings)
    log_event(logger, "menu", "start", "ok", base_url=settings.OPS_BASE_URL, preferences=settings.OPS_PREFERENCES_BACKEND)
    try:
        while True:
            screen = choose_screen()
            if screen is None:
                return
            build_console(settings, screen, http_client).run()
    finally:
        http_client.close()


def main() -> None:
    run_cli()


if __name__ == "__main__":
    main()

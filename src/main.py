"""Entry point: serve | oneshot."""

import sys


def _split_platform(args: list[str]) -> tuple[str, list[str]]:
    platform = "all"
    rest: list[str] = []
    for arg in args:
        if arg.startswith("--platform="):
            platform = arg.split("=", 1)[1]
        else:
            rest.append(arg)
    return platform, rest


def main():
    mode = "serve"
    if len(sys.argv) > 1:
        mode = sys.argv[1].lower()

    if mode == "serve":
        import uvicorn

        from src.core.config import Config
        from src.server.app import create_app

        cfg = Config.load()
        uvicorn.run(create_app(), host=cfg.host, port=cfg.port)

    elif mode == "oneshot":
        from src.interfaces.oneshot import main as run_oneshot_main

        platform, query_parts = _split_platform(sys.argv[2:])
        if query_parts:
            query = " ".join(query_parts).strip()
        else:
            query = sys.stdin.read().strip()
        sys.exit(run_oneshot_main(query=query, platform=platform))

    else:
        print(f"Unknown mode: {mode}")
        print("Usage: python -m src.main [serve|oneshot [--platform=NAME] QUERY]")
        sys.exit(1)


if __name__ == "__main__":
    main()

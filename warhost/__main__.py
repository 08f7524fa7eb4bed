"""Entry point for ``python -m warhost <command>``.

Commands:
    generate  – build a scenario from a JSON input file (optionally campaign-aware)
    options   – list catalog options (factions, subfactions, planets, segmentums, tones)
    serve     – run the HTTP API with uvicorn
    settings  – show the resolved text-enhancement configuration
"""
from warhost.cli import main

if __name__ == "__main__":
    main()

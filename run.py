#!/usr/bin/env python3
"""
Run the Agent Orchestrator API server.

Usage:
    python run.py                    # Run on default port 8000
    python run.py --port 8080        # Run on custom port
    python run.py --reload           # Run with hot reload (dev mode)

Environment Variables (set in .env file or export):
    AZURE_BASE_URL / AZURE_API_KEY / AZURE_MODEL_NAME   # Azure OpenAI (default provider)
    AZURE_MODEL_NAME_O4_MINI                            # Azure deployment for the coding agent
    OPENAI_API_KEY or ANTHROPIC_API_KEY                 # Alternatives to Azure
    TAVILY_API_KEY=tvly-...                             # Optional: web search (mock if not set)

Quick Start:
    1. Create a .env file with your API keys
    2. Install: pip install -e .
    3. Run the server: python run.py
    4. Open http://localhost:8000/docs in your browser
"""

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env before the package reads its configuration
load_dotenv(Path(__file__).parent / ".env")


def main():
    from agent_orchestrator.config import config

    parser = argparse.ArgumentParser(description="Run the Agent Orchestrator API")
    parser.add_argument("--host", default=config.api_host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=config.api_port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    missing = config.missing_settings()
    if missing:
        print("⚠️  Warning: the API will not function until these are set:")
        for name in missing:
            print(f"   - {name}")
    else:
        print(f"✅ Using {config.llm_provider} as LLM provider")

    if not config.tavily_api_key:
        print("ℹ️  Note: TAVILY_API_KEY not set. Web search will use mock data.")

    print(f"""
╔══════════════════════════════════════════════════════════════╗
║         Agent Orchestrator                                    ║
╠══════════════════════════════════════════════════════════════╣
║  🧭 Planner Agent     - Breaks a query into web searches      ║
║  🔬 Search Agent      - Runs searches concurrently            ║
║  📝 Writer Agent      - Writes the structured report          ║
║  🎯 Triage Agent      - Hands off to docs or coding agents    ║
╚══════════════════════════════════════════════════════════════╝

🚀 Starting server at http://{args.host}:{args.port}
📖 API docs at http://localhost:{args.port}/docs
""")

    import uvicorn
    uvicorn.run(
        "agent_orchestrator.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload
    )


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Market Status - one-shot overview of the token feed
Loads a snapshot and prints the first page plus the top-5 lists
"""

import asyncio
import logging

from colorama import Fore, init

from marketview import FilterMode, MarketViewSession
from marketview_config import get_market_view_config, is_market_view_enabled

init(autoreset=True)
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def print_state(state):
    print(f"{Fore.CYAN}━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    print(f"{Fore.GREEN}📊 MARKET STATUS ({state.source}, snapshot #{state.generation})")
    print(f"{Fore.CYAN}━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")

    for title, entries in state.projections.as_sections().items():
        print(f"\n{Fore.YELLOW}{title}:")
        if not entries:
            print(f"  {Fore.WHITE}No data available")
        for idx, entry in enumerate(entries, 1):
            color = Fore.GREEN if entry.price_change_24h_pct > 0 else Fore.RED
            print(f"  {idx}. {entry.ticker_label:10s} {color}{entry.price_change_24h_pct:+.2f}%")

    print(f"\n{Fore.YELLOW}{state.filter_summary()} | {state.page.summary()}")
    if state.empty_state_message:
        print(f"{Fore.RED}{state.empty_state_message}")

    for entry in state.items:
        created = entry.created_at.strftime("%Y-%m-%d %H:%M") if entry.created_at else "-"
        print(
            f"  {entry.name[:24]:24s} {entry.symbol[:8]:8s} {created:16s} "
            f"liq=${entry.liquidity_usd:,.0f} vol24=${entry.volume_24h:,.0f} "
            f"[{entry.audit_status}]"
        )

    pages = " ".join("..." if n is None else str(n) for n in state.page_window)
    print(f"{Fore.CYAN}Pages: {pages}\n")


async def quick_status():
    if not is_market_view_enabled():
        print(f"{Fore.YELLOW}Market view disabled in config")
        return

    config = get_market_view_config()
    async with MarketViewSession.from_config(config) as session:
        await session.load()
        print_state(session.set_active_filter_mode(FilterMode.TRENDING))


if __name__ == "__main__":
    asyncio.run(quick_status())

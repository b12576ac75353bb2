"""Message templates — update summary, buys, status, watch list, help."""

from __future__ import annotations

from src.models import BotConfig, ContractData

ONBOARDING_CAPTION = "Please add me to a group to configure and use my features."
GROUP_WELCOME = (
    "Hello! I track Solana contract buys and market cap.\n"
    "Use /config to set the contract address, /setgif URL to set the buy "
    "alert GIF and /help for all commands."
)


def format_buys(data: ContractData) -> str:
    """Enumerated buy lines, one per transaction."""
    return "\n".join(
        f"Buy {i}: {buy.amount} SOL" for i, buy in enumerate(data.buys, start=1)
    )


def format_update(data: ContractData) -> str:
    """Scheduled update: market cap followed by recent buys."""
    lines = [f"Market Cap: {data.market_cap}", "Recent Buys:"]
    if data.buys:
        lines.append(format_buys(data))
    else:
        lines.append("None")
    return "\n".join(lines)


def format_watch_notice(address: str, data: ContractData) -> str:
    count = len(data.buys)
    noun = "buy" if count == 1 else "buys"
    return f"🔔 Buy activity detected on watched address `{address}` ({count} {noun})"


def format_status(config: BotConfig, schedules: dict[str, str] | None = None) -> str:
    """Format bot configuration for /status command."""
    lines = ["*⚙️ Bot Status*", ""]
    lines.append(f"Contract: `{config.contract_address}`" if config.contract_address
                 else "Contract: not set")
    lines.append(f"Alert GIF: {config.alert_gif}" if config.alert_gif else "Alert GIF: none")
    lines.append(f"Chat: `{config.chat_id}`" if config.chat_id else "Chat: not set")
    lines.append(f"Watch list: {len(config.watch_list)} address(es)")
    lines.append(f"Last update: {config.last_update or 'never'}")
    if schedules:
        times = ", ".join(sorted(set(schedules.values())))
        lines.append(f"Daily updates: {times}")
    return "\n".join(lines)


def format_watchlist(watch_list: list[str]) -> str:
    if not watch_list:
        return "Watch list is empty."
    return "\n".join(watch_list)


def format_help() -> str:
    return (
        "*Available Commands*\n\n"
        "`/config` — Set the contract address (send it as the next message)\n\n"
        "`/status` — View current configuration\n\n"
        "`/marketcap` — Current market cap\n\n"
        "`/recentbuys` — Recent buy transactions\n\n"
        "`/addwatch ADDRESS` — Watch an address for buys\n\n"
        "`/removewatch ADDRESS` — Stop watching an address\n\n"
        "`/watchlist` — List watched addresses\n\n"
        "`/schedule HH:MM` — Daily update at a fixed time\n\n"
        "`/setgif URL` — Set the GIF sent with updates\n\n"
        "`/setcontract ADDRESS` — Set the contract without verification\n\n"
        "`/help` — Show this message"
    )

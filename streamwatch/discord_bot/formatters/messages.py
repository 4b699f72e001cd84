"""
Message texts and formatting for Discord notifications and command replies.

Centralizes every user-facing string, per locale.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from streamwatch.core.interfaces import MessageFormatter
from streamwatch.core.models import CatalogEntry, ContentKind, LiveStatus, Platform
from streamwatch.utils import DEFAULT_LOCALE


# =============================================================================
# Message Catalogue
# =============================================================================

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "streamAnnounce": "🔴 **{name}** is live on {platform}!",
        "streamAnnounceTitle": "\n*{title}*",
        "youtubeVideoAnnounce": "📺 **{name}** uploaded a new video!",
        "youtubePremiereAnnounce": "⏰ **{name}** scheduled a premiere!",

        "cmdAlreadyInList": "That channel is already in the list.",
        "cmdAdded": "Added: **{name}** ({platform}).",
        "cmdNotFound": "Could not find a YouTube or Twitch channel for `{query}`.",
        "cmdNoStreamers": "No streamers in the list. Use `!stream add ...`.",
        "cmdStreamersHeader": "**Streamers:**",
        "cmdInvalidIndex": "Invalid index. Use `!stream list` to see the numbers.",
        "cmdRemoved": "Removed: **{name}** ({platform}).",
        "cmdLiveHeader": "**Currently Online Streamers:**",
        "cmdLiveNone": "No one is online at the moment.",
        "cmdServiceUnavailable": "Service unavailable for: {platforms}",
        "cmdNoChannel": "No notification channel configured. Use `!stream channel <#channel>`.",
        "cmdTestFailed": "Could not post the test notification. Check the channel permissions.",

        "cmdConfigSaved": "**{type}** configuration saved successfully!",
        "cmdConfigReset": "**{type}** configurations reset!",
        "cmdConfigInfoStream": "**Stream** configuration:\n\n• Channel: {channel}\n• Role: {role}\n• Message: {message}",
        "cmdConfigTestTriggered": "**{type}** test triggered! Check the configured channel.",
        "cmdStreamUsage": (
            "**Stream commands:**\n"
            "`!stream add <url | id | name>` – add a YouTube or Twitch channel\n"
            "`!stream list` – list streamers\n"
            "`!stream remove <number>` – remove by list index\n"
            "`!stream live` – see who is live right now\n"
            "`!stream channel <#channel>` / `role <@role>` / `message <text>` – notification settings\n"
            "`!stream info` / `test` / `reset` / `language <en|pt>`"
        ),

        "languageSet": "✅ Bot language set to: **{language}**",
        "languageInvalid": "❌ Invalid language. Use: `pt` or `en`",
    },
    "pt": {
        "streamAnnounce": "🔴 **{name}** está ao vivo no {platform}!",
        "streamAnnounceTitle": "\n*{title}*",
        "youtubeVideoAnnounce": "📺 **{name}** publicou um novo vídeo!",
        "youtubePremiereAnnounce": "⏰ **{name}** agendou uma estreia!",

        "cmdAlreadyInList": "Esse canal já está na lista.",
        "cmdAdded": "Adicionado: **{name}** ({platform}).",
        "cmdNotFound": "Não encontrei um canal do YouTube ou da Twitch para `{query}`.",
        "cmdNoStreamers": "Nenhum streamer na lista. Use `!stream add ...`.",
        "cmdStreamersHeader": "**Streamers:**",
        "cmdInvalidIndex": "Índice inválido. Use `!stream list` para ver os números.",
        "cmdRemoved": "Removido: **{name}** ({platform}).",
        "cmdLiveHeader": "**Streamers Online agora:**",
        "cmdLiveNone": "Ninguém está online no momento.",
        "cmdServiceUnavailable": "Serviço indisponível para: {platforms}",
        "cmdNoChannel": "Nenhum canal de anúncios configurado. Use `!stream channel <#canal>`.",
        "cmdTestFailed": "Não foi possível enviar o anúncio de teste. Verifique as permissões do canal.",

        "cmdConfigSaved": "Configuração de **{type}** salva com sucesso!",
        "cmdConfigReset": "Configurações de **{type}** resetadas!",
        "cmdConfigInfoStream": "Configuração de **Stream**:\n\n• Canal: {channel}\n• Cargo: {role}\n• Mensagem: {message}",
        "cmdConfigTestTriggered": "Teste de **{type}** disparado! Verifique o canal configurado.",
        "cmdStreamUsage": (
            "**Comandos de stream:**\n"
            "`!stream add <url | id | nome>` – adicionar canal do YouTube ou da Twitch\n"
            "`!stream list` – listar streamers\n"
            "`!stream remove <número>` – remover pelo índice da lista\n"
            "`!stream live` – ver quem está ao vivo agora\n"
            "`!stream channel <#canal>` / `role <@cargo>` / `message <texto>` – configurações de anúncio\n"
            "`!stream info` / `test` / `reset` / `language <en|pt>`"
        ),

        "languageSet": "✅ Idioma do bot definido para: **{language}**",
        "languageInvalid": "❌ Idioma inválido. Use: `pt` ou `en`",
    },
}


def substitute(template: str, **params) -> str:
    """Replace {key} placeholders; unknown braces are left untouched."""
    for key, value in params.items():
        template = template.replace("{" + key + "}", "" if value is None else str(value))
    return template


def t(locale: Optional[str], key: str, **params) -> str:
    """
    Get a localized text.

    Args:
        locale: Locale code; unknown locales fall back to the default
        key: Message key
        **params: Placeholder values

    Returns:
        Rendered text (the key itself if no locale defines it)
    """
    texts = MESSAGES.get(locale or DEFAULT_LOCALE) or MESSAGES[DEFAULT_LOCALE]
    template = texts.get(key) or MESSAGES[DEFAULT_LOCALE].get(key) or key
    return substitute(template, **params)


# =============================================================================
# Notification Formatting
# =============================================================================

def format_stream_message(
    locale: Optional[str],
    platform: str,
    name: str,
    url: str,
    title: Optional[str] = None,
    mention: str = "",
    template: Optional[str] = None,
) -> str:
    """
    Format a "went live" notification.

    A custom template gets {name} {platform} {url} {title} substituted and
    the mention prepended. Otherwise the localized default is used: announce
    line, url, optional title line and optional mention, one per line.
    """
    if template:
        message = substitute(template, name=name, platform=platform, url=url, title=title or "")
        if mention:
            message = f"{mention} {message}"
        return message

    parts = [t(locale, "streamAnnounce", name=name, platform=platform), url]
    if title:
        parts.append(t(locale, "streamAnnounceTitle", title=title))
    if mention:
        parts.append(mention)
    return "\n".join(parts)


def format_content_message(
    locale: Optional[str],
    kind: ContentKind,
    name: str,
    url: str,
    title: Optional[str] = None,
    mention: str = "",
) -> str:
    """Format a new video / premiere notification (never templated)."""
    key = "youtubePremiereAnnounce" if kind is ContentKind.PREMIERE else "youtubeVideoAnnounce"
    parts = [t(locale, key, name=name), url]
    if title:
        parts.append(t(locale, "streamAnnounceTitle", title=title))
    if mention:
        parts.append(mention)
    return "\n".join(parts)


class DiscordMessageFormatter(MessageFormatter):
    """MessageFormatter backed by the message catalogue."""

    def live_message(self, locale, platform, name, url, title=None, mention="", template=None) -> str:
        return format_stream_message(locale, platform, name, url, title, mention, template)

    def content_message(self, locale, kind, name, url, title=None, mention="") -> str:
        return format_content_message(locale, kind, name, url, title, mention)


# =============================================================================
# Command Reply Formatting
# =============================================================================

def format_streamer_line(index: int, entry: CatalogEntry) -> str:
    """Format one numbered subscription line."""
    return f"{index}. **{entry.display_name}** ({entry.platform.value}) - `{entry.external_id}`"


def format_streamer_list(locale: Optional[str], entries: List[CatalogEntry]) -> str:
    """Format a guild's subscriptions, numbered from 1 in subscription order."""
    if not entries:
        return t(locale, "cmdNoStreamers")
    lines = [t(locale, "cmdStreamersHeader")]
    lines.extend(format_streamer_line(i, entry) for i, entry in enumerate(entries, start=1))
    return "\n".join(lines)


def format_unavailable(locale: Optional[str], platforms: Iterable[Platform]) -> str:
    return t(locale, "cmdServiceUnavailable", platforms=", ".join(p.label for p in platforms))


def format_live_listing(
    locale: Optional[str],
    live: List[Tuple[CatalogEntry, LiveStatus]],
    unavailable: List[Platform],
) -> str:
    """Format the on-demand "who's live" reply."""
    if live:
        lines = [t(locale, "cmdLiveHeader")]
        for entry, status in live:
            lines.append(f"- **{entry.display_name}** ({entry.platform.value}): {status.url or entry.default_url}")
    else:
        lines = [t(locale, "cmdLiveNone")]
    if unavailable:
        lines.append(format_unavailable(locale, unavailable))
    return "\n".join(lines)


def format_stream_info(
    locale: Optional[str],
    channel_id: Optional[str],
    role_id: Optional[str],
    message: Optional[str],
) -> str:
    """Format the guild's current notification settings."""
    return t(
        locale,
        "cmdConfigInfoStream",
        channel=f"<#{channel_id}>" if channel_id else "---",
        role=f"<@&{role_id}>" if role_id else "---",
        message=message or "---",
    )

"""Internationalisation helpers for Dada Bucks messages."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

_EN: Dict[str, str] = {
    # Task completion
    "task.completed": "Great job! {earned} Dada Bucks will be added at {reset_time}!",
    "task.undone": "Task completion undone",
    "task.added": "Task added",
    "task.updated": "Task updated",
    "task.deleted": "Task deleted",
    "task.activated": "Task turned on",
    "task.deactivated": "Task turned off",
    # Spend catalog
    "item.added": "Spend item added",
    "item.updated": "Spend item updated",
    "item.deleted": "Spend item deleted",
    # Children
    "child.added": "{name} joined Dada Bucks!",
    "child.updated": "Profile updated",
    "child.deleted": "{name} was removed",
    # Strikes
    "strike.added": "Strike {count} of {max_strikes}. {remaining} more and earnings are forfeited!",
    "strike.forfeit": "{max_strikes} STRIKES! All pending earnings ({forfeited} DB) forfeited!",
    "strike.removed": "Strike removed",
    "strike.reset": "All strikes cleared",
    # Savings
    "savings.deposited": "Moved {amount} DB to savings!",
    "savings.withdrawn": "Withdrew {amount} DB from savings!",
    # Spend requests
    "request.sent": "Request sent to parent for approval!",
    "request.approved": "Request approved!",
    "request.denied": "Request denied",
    "request.cancelled": "Request cancelled",
    "notification.shown": "Notification dismissed",
    # Vault
    "vault.added": "Added {amount} DB to the vault",
    "vault.removed": "Removed {amount} DB from the vault",
    # Ledger descriptions
    "desc.earn": "Daily deposit: {amount} Dada Bucks earned today",
    "desc.interest": "Savings interest: +{amount} Dada Bucks",
    "desc.strike_penalty": "{max_strikes} strikes - All pending earnings forfeited!",
    "desc.savings_deposit": "Moved {amount} DB to savings",
    "desc.savings_withdrawal": "Withdrew {amount} DB from savings",
    "desc.spend": "Spent: {items}",
    # Failures
    "error.not_found": "Not found",
    "error.not_found.task": "Task not found",
    "error.not_found.child": "Child not found",
    "error.not_found.request": "Request not found",
    "error.not_found.strike": "Strike not found",
    "error.not_found.item": "Spend item not found",
    "error.not_found.notification": "Notification not found",
    "error.inactive": "This task is not active",
    "error.strikes_exhausted": "Cannot earn - {max_strikes} strikes today! All earnings forfeited.",
    "error.daily_cap_reached": "Daily limit reached ({daily_max}/{daily_max})",
    "error.strike_cap_reached": "Maximum strikes already reached today",
    "error.vault_insufficient": "Vault is empty! Add more Dada Bucks.",
    "error.vault_insufficient.vault": "The vault only has {balance} DB",
    "error.insufficient_balance": "Not enough Dada Bucks",
    "error.insufficient_balance.savings": "Not enough balance. You have {balance} DB",
    "error.insufficient_balance.request": "Not enough Dada Bucks! You have {balance}, need {amount}",
    "error.insufficient_balance.approval": "Child no longer has enough balance",
    "error.insufficient_savings": "Not enough savings. You have {savings} DB",
    "error.invalid_amount": "Amount must be positive",
    "error.invalid_amount.request": "{detail}",
    "error.invalid_amount.task": "{detail}",
    "error.invalid_amount.item": "{detail}",
    "error.invalid_amount.child": "{detail}",
    "error.request_already_pending": "You already have a pending request! Wait for parent approval.",
    "error.last_child_protected": "Can't remove the last child",
    "error.nothing_to_undo": "No completions to undo",
}

_ES: Dict[str, str] = {
    "task.completed": "¡Buen trabajo! {earned} Dada Bucks se sumarán a las {reset_time}.",
    "task.undone": "Tarea deshecha",
    "task.added": "Tarea añadida",
    "task.updated": "Tarea actualizada",
    "task.deleted": "Tarea eliminada",
    "task.activated": "Tarea activada",
    "task.deactivated": "Tarea desactivada",
    "child.added": "¡{name} se unió a Dada Bucks!",
    "child.deleted": "{name} fue eliminado",
    "strike.added": "Falta {count} de {max_strikes}. ¡{remaining} más y se pierden las ganancias!",
    "strike.forfeit": "¡{max_strikes} FALTAS! Se perdieron las ganancias pendientes ({forfeited} DB).",
    "strike.reset": "Faltas borradas",
    "savings.deposited": "¡{amount} DB pasaron a ahorros!",
    "savings.withdrawn": "¡Retiraste {amount} DB de ahorros!",
    "request.sent": "¡Solicitud enviada para aprobación!",
    "request.approved": "¡Solicitud aprobada!",
    "request.denied": "Solicitud rechazada",
    "desc.earn": "Depósito diario: {amount} Dada Bucks ganados hoy",
    "desc.interest": "Interés de ahorros: +{amount} Dada Bucks",
    "error.not_found.task": "Tarea no encontrada",
    "error.not_found.request": "Solicitud no encontrada",
    "error.inactive": "Esta tarea no está activa",
    "error.strikes_exhausted": "No puedes ganar: ¡{max_strikes} faltas hoy!",
    "error.daily_cap_reached": "Límite diario alcanzado ({daily_max}/{daily_max})",
    "error.vault_insufficient": "¡La bóveda está vacía!",
    "error.insufficient_savings": "No hay suficientes ahorros. Tienes {savings} DB",
    "error.request_already_pending": "¡Ya tienes una solicitud pendiente!",
    "error.nothing_to_undo": "No hay nada que deshacer",
}


class _Fields(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class Translator:
    """Store translations for short interface strings."""

    def __init__(self, default_locale: str = "en", *, translations: Optional[Mapping[str, Mapping[str, str]]] = None) -> None:
        self.default_locale = default_locale
        self._translations: Dict[str, Dict[str, str]] = {"en": dict(_EN), "es": dict(_ES)}
        self._translations.setdefault(default_locale, {})
        if translations:
            for locale, mapping in translations.items():
                self._translations.setdefault(locale, {}).update(mapping)

    def set_translation(self, locale: str, key: str, value: str) -> None:
        self._translations.setdefault(locale, {})[key] = value

    def has(self, key: str, *, locale: Optional[str] = None) -> bool:
        target_locale = locale or self.default_locale
        return key in self._translations.get(target_locale, {}) or key in self._translations["en"]

    def translate(self, key: str, *, locale: Optional[str] = None, **fields: object) -> str:
        target_locale = locale or self.default_locale
        template = self._translations.get(target_locale, {}).get(key)
        if template is None:
            template = self._translations["en"].get(key, key)
        return template.format_map(_Fields(fields))

    def available_locales(self) -> tuple[str, ...]:
        return tuple(sorted(self._translations))


__all__ = ["Translator"]

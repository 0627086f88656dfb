"""OrganizeIT chat assistant -- rule-based, canned operational answers.

Classifies a free-text message with an ordered list of keyword rules
(case-insensitive substring containment, first match wins, no scoring)
and answers with a fixed multi-section template plus four follow-up
suggestions. Both sides of every exchange are persisted under
chat:<user_id>:<epoch-ms> so replaying keys in order rebuilds the
conversation.
"""

from __future__ import annotations

import time
from typing import Callable

from organizeit.clock import Clock, iso_from_ms, now_ms
from organizeit.errors import MalformedInput
from organizeit.log import logger
from organizeit.models import ChatRecord, dump
from organizeit.state.collection import key_lock
from organizeit.store.kv import KeyValueStore


# ---------------------------------------------------------------------------
# Intent detection -- order is the precedence contract
# ---------------------------------------------------------------------------

_INTENT_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("cost", ("cost", "save", "optimize")),
    ("incident", ("alert", "incident", "problem")),
    ("sustainability", ("esg", "carbon", "sustainability")),
    ("automation", ("ai", "predict", "automat")),
]


def _detect_intent(message: str) -> str:
    """Return the first intent whose keywords appear in the message, or 'general'."""
    lowered = message.lower()
    for intent, keywords in _INTENT_RULES:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return "general"


# ---------------------------------------------------------------------------
# Canned responses
# ---------------------------------------------------------------------------

def _respond_cost(message: str) -> dict:
    lines = [
        "💰 **Cost Optimization Analysis:**",
        "",
        "Based on real-time data analysis, I've identified these opportunities:",
        "",
        "**High Impact:**",
        "• Right-size 23 oversized EC2 instances → $24,000/month savings",
        "• Purchase Reserved Instances for consistent workloads → $35,000/month savings",
        "",
        "**Medium Impact:**  ",
        "• Migrate cold storage to IA/Glacier → $12,000/month savings",
        "• Optimize network traffic routing → $8,500/month savings",
        "",
        "**Total Potential Savings: $79,500/month (31% reduction)**",
        "",
        "Would you like me to create an implementation roadmap?",
    ]
    return {
        "intent": "cost",
        "response": "\n".join(lines),
        "suggestions": [
            "Create implementation roadmap",
            "Prioritize by ROI",
            "Schedule optimization tasks",
            "Generate executive report",
        ],
    }


def _respond_incident(message: str) -> dict:
    lines = [
        "🚨 **Current System Status:**",
        "",
        "**Critical Alerts (2):**",
        "• Database timeout in Payment API - 2 hours active",
        "• High CPU usage on web frontend - 30 minutes active",
        "",
        "**Recommendations:**",
        "1. Scale Payment API database connections immediately",
        "2. Enable auto-scaling for web frontend",
        "3. Review recent deployments for potential causes",
        "",
        "**Impact Assessment:**",
        "• Payment processing: 15% slower response times",
        "• User experience: Minimal impact detected",
        "",
        "Should I initiate automated remediation procedures?",
    ]
    return {
        "intent": "incident",
        "response": "\n".join(lines),
        "suggestions": [
            "Start automated remediation",
            "Escalate to on-call engineer",
            "View detailed diagnostics",
            "Create incident report",
        ],
    }


def _respond_sustainability(message: str) -> dict:
    lines = [
        "🌱 **ESG Impact Dashboard:**",
        "",
        "**Current Performance:**",
        "• Carbon Footprint: 40.7 tCO₂/month (-27% YTD)",
        "• Renewable Energy: 68% of total consumption",
        "• Water Efficiency: 83% (industry leading)",
        "",
        "**Smart Recommendations:**",
        "1. **Workload Scheduling:** Shift batch jobs to low-carbon hours",
        "   → Reduce 2.4 tCO₂/month (6% improvement)",
        "",
        "2. **Green Computing:** Optimize for renewable energy availability",
        "   → Target 85% renewable by Q4",
        "",
        "3. **Efficiency Gains:** Advanced cooling optimization",
        "   → 15% reduction in energy consumption",
        "",
        "**Compliance Status:** On track for carbon neutrality by 2030",
    ]
    return {
        "intent": "sustainability",
        "response": "\n".join(lines),
        "suggestions": [
            "Implement smart scheduling",
            "View renewable energy plan",
            "Generate ESG report",
            "Set sustainability goals",
        ],
    }


def _respond_automation(message: str) -> dict:
    lines = [
        "🤖 **AI Operations Intelligence:**",
        "",
        "**Predictive Insights:**",
        "• 94.2% accuracy in resource demand forecasting",
        "• Next Tuesday: 23% CPU spike predicted (high confidence)",
        "• Cost anomaly detected in Azure storage (+340% unusual)",
        "",
        "**Active Automations:**",
        "• Incident response: 78% automated resolution",
        "• Resource scaling: 92% predictive scaling success",
        "• Security threats: Real-time ML-based detection",
        "",
        "**Model Performance:**",
        "• Anomaly Detection: 96.1% accuracy",
        "• Cost Prediction: 89.5% accuracy  ",
        "• Performance Forecasting: 94.2% accuracy",
        "",
        "**ROI Impact:** $127K saved YTD through AI optimizations",
    ]
    return {
        "intent": "automation",
        "response": "\n".join(lines),
        "suggestions": [
            "Review prediction models",
            "Configure auto-scaling",
            "Investigate cost anomaly",
            "Enhance automation rules",
        ],
    }


def _respond_general(message: str) -> dict:
    # The reply echoes the caller's message verbatim
    lines = [
        f'I understand you\'re asking about "{message}". ',
        "",
        "As your OrganizeIT AI Assistant, I have access to real-time data across:",
        "• IT Operations & Monitoring",
        "• Financial Operations (FinOps) ",
        "• ESG & Sustainability Metrics",
        "• Security & Compliance",
        "• Resource Optimization",
        "",
        "I can help you with analysis, recommendations, troubleshooting, and automation. "
        "What specific area would you like to explore?",
    ]
    return {
        "intent": "general",
        "response": "\n".join(lines),
        "suggestions": [
            "Analyze current performance",
            "Show optimization opportunities",
            "Check system health",
            "Review recent changes",
        ],
    }


_HANDLERS: dict[str, Callable[[str], dict]] = {
    "cost": _respond_cost,
    "incident": _respond_incident,
    "sustainability": _respond_sustainability,
    "automation": _respond_automation,
    "general": _respond_general,
}


def respond(message: str) -> dict:
    """Classify and answer without persisting anything.

    Returns:
        {"intent": str, "response": str (markdown), "suggestions": list[str]}
    """
    intent = _detect_intent(message)
    handler = _HANDLERS.get(intent, _respond_general)
    return handler(message)


# ---------------------------------------------------------------------------
# Router with persistence
# ---------------------------------------------------------------------------

class ChatIntentRouter:
    """Answers chat messages and records the exchange per user."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        max_message_length: int = 2000,
        clock: Clock = time.time,
    ) -> None:
        self._store = store
        self._max_len = max_message_length
        self._clock = clock

    def handle(self, message: str, context: str | None = None, user_id: str | None = None) -> dict:
        """Answer `message` and persist it plus the reply as two chat records.

        The reply's key and timestamp are always at least 1 ms after the
        inbound message's.
        """
        if not isinstance(message, str):
            raise MalformedInput("message must be a string")
        message = message.strip()
        if not message:
            raise MalformedInput("message is required")
        if len(message) > self._max_len:
            logger.debug("Chat message truncated from %d to %d chars", len(message), self._max_len)
            message = message[:self._max_len]
        user_id = (user_id or "anonymous").strip() or "anonymous"
        if ":" in user_id:
            raise MalformedInput("userId may not contain ':'")
        context = context or "general"

        logger.info("Chat message from user %s (context=%s)", user_id, context)

        # Stamp selection and the write must not interleave with another
        # request from the same user
        with key_lock(f"chat:{user_id}"):
            sent_ms = self._free_stamp(user_id, now_ms(self._clock))
            self._store.set(f"chat:{user_id}:{sent_ms}", dump(ChatRecord(
                user_id=user_id,
                message=message,
                context=context,
                timestamp=iso_from_ms(sent_ms),
                type="user",
            )))

            result = respond(message)

            reply_ms = self._free_stamp(user_id, max(sent_ms + 1, now_ms(self._clock)))
            reply_ts = iso_from_ms(reply_ms)
            self._store.set(f"chat:{user_id}:{reply_ms}", dump(ChatRecord(
                user_id=user_id,
                message=result["response"],
                context=context,
                timestamp=reply_ts,
                type="bot",
                suggestions=result["suggestions"],
            )))

        logger.debug("Chat intent %s for user %s", result["intent"], user_id)
        return {
            "response": result["response"],
            "suggestions": result["suggestions"],
            "intent": result["intent"],
            "timestamp": reply_ts,
        }

    def _free_stamp(self, user_id: str, stamp: int) -> int:
        """First millisecond >= stamp with no record yet for this user."""
        while self._store.get(f"chat:{user_id}:{stamp}") is not None:
            stamp += 1
        return stamp

    def history(self, user_id: str, limit: int = 100) -> list[dict]:
        """Replay a user's stored exchange, oldest first, keeping the last `limit` records."""
        if limit < 1:
            raise MalformedInput("limit must be at least 1")
        entries = self._store.list(f"chat:{user_id}:")
        # Keys share a prefix, so sort on the numeric stamp rather than the string
        entries.sort(key=lambda kv: int(kv[0].rsplit(":", 1)[1]))
        records = [value for _key, value in entries]
        return records[-limit:]

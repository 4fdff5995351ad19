"""
Marketing service - AI generated client messages, business ideas, tips and
dashboard suggestions. Any API failure degrades to a fixed Portuguese message.
"""

import logging
from typing import Literal, Optional, get_args

from fastapi import HTTPException
from pydantic import BaseModel

from ...state import AppState
from ..dashboard.schemas import ClientSummary
from ..dashboard.service import DashboardService
from .gemini_client import GeminiClient, GeminiError
from .usage_limiter import UsageLimiter

logger = logging.getLogger(__name__)

MessageCategory = Literal["daily", "prospect", "promo", "birthday", "reminder"]
IdeaCategory = Literal["software", "marketing"]

BASE_INSTRUCTION = (
    "You are BeautyFlow AI, an expert AI assistant for 'Luxury Studio de Beleza Joyci Almeida', "
    "a high-end beauty studio in Brazil. Your tone is helpful, luxurious, and encouraging. "
    "Your responses should be in Brazilian Portuguese. "
)

CATEGORY_INSTRUCTIONS = {
    "daily": "Generate a short, engaging beauty tip or fact for clients. Use emojis. Keep it concise and uplifting.",
    "prospect": (
        "Generate a compelling message to attract new clients. Highlight a specific service "
        "and offer an introductory discount. Be persuasive and elegant."
    ),
    "promo": (
        "Generate a friendly message for an inactive client to encourage them to return. "
        "Mention that you miss them and suggest a service. Be warm and inviting."
    ),
    "birthday": (
        "Generate a warm and celebratory birthday message for a client. "
        "Offer a special birthday gift or discount. Use festive emojis."
    ),
    "reminder": (
        "Generate a short, polite appointment reminder for a client. Ask them to confirm "
        "their presence and mention the aftercare tips they received. Be warm and brief."
    ),
    "software": (
        "Suggest a specific type of software or app that can help a beauty studio owner optimize "
        "their business. Explain the benefit in one sentence. Example: 'Sugestão de software: "
        "**App de Agendamento Inteligente** - Otimiza sua agenda e reduz faltas.'"
    ),
    "marketing": (
        "Suggest a creative marketing idea to attract or retain clients for a beauty studio. "
        "Be specific and actionable. Example: 'Ideia de marketing: **Pacote Fidelidade 'Beauty VIP'** "
        "- A cada 5 procedimentos, o 6º tem 50% de desconto.'"
    ),
    "mascot": (
        "Generate a single, very short, proactive, and helpful tip for a beauty professional using "
        "this dashboard. It should be one sentence. Start with 'Que tal...' or 'Você sabia que...'. "
        "No markdown."
    ),
    "dashboard": (
        "Analyze the provided client data summary and generate one specific, actionable suggestion "
        "to improve the business. For example, suggest contacting an inactive client, promoting a "
        "popular service, or noting an upcoming birthday. Be concise and start with an emoji."
    ),
}

MESSAGE_FALLBACK = "Desculpe, não foi possível gerar o conteúdo no momento. Tente novamente mais tarde."
IDEA_FALLBACK = "Desculpe, não foi possível gerar a ideia no momento. Tente novamente mais tarde."
MASCOT_FALLBACK = "Lembre-se de beber água!"
SUGGESTION_FALLBACK = "😕 Não foi possível gerar uma sugestão. Tente novamente."
NO_CLIENTS_SUGGESTION = "Adicione seus primeiros clientes para receber sugestões personalizadas!"


class GenerationRequest(BaseModel):
    clientName: Optional[str] = None


class GenerationResponse(BaseModel):
    category: str
    text: str
    remaining: Optional[int] = None  # generations left today, for limited categories


def system_instruction(category: str, client_name: Optional[str] = None) -> str:
    instruction = BASE_INSTRUCTION
    if client_name:
        instruction += f"The message is for a client named {client_name}. Personalize it. "
    return instruction + CATEGORY_INSTRUCTIONS.get(category, "")


def summary_text(summary: ClientSummary) -> str:
    return (
        f"Client data summary: Total clients: {summary.totalClients}. "
        f"Inactive clients (60+ days): {summary.inactiveClients}. "
        f"Clients with birthdays in the next 30 days: {summary.upcomingBirthdays}."
    )


class MarketingService:
    """Service layer for AI-assisted marketing copy"""

    def __init__(
        self,
        state: AppState,
        client: Optional[GeminiClient] = None,
        limiter: Optional[UsageLimiter] = None,
    ):
        self.state = state
        self.client = client or GeminiClient()
        self.limiter = limiter or UsageLimiter()

    def _consume(self, category: str) -> int:
        if not self.limiter.try_consume(self.state.owner_id, category):
            logger.warning(f"⚠️ User {self.state.owner_id} reached the daily AI limit for '{category}'")
            raise HTTPException(
                status_code=429,
                detail=f"Limite diário de {self.limiter.limit} gerações atingido para esta categoria.",
            )
        return self.limiter.remaining(self.state.owner_id, category)

    async def _generate(self, prompt: str, instruction: str, fallback: str, **options) -> str:
        try:
            return await self.client.generate(prompt, instruction, **options)
        except GeminiError as e:
            logger.error(f"❌ AI generation failed, using fallback text: {e}")
            return fallback

    async def generate_message(self, category: str, client_name: Optional[str] = None) -> GenerationResponse:
        remaining = self._consume(category)
        text = await self._generate(
            f"Please generate a message for the '{category}' category.",
            system_instruction(category, client_name),
            MESSAGE_FALLBACK,
            temperature=0.8,
            top_p=0.9,
        )
        return GenerationResponse(category=category, text=text, remaining=remaining)

    async def generate_idea(self, category: str) -> GenerationResponse:
        remaining = self._consume(category)
        text = await self._generate(
            f"Please generate an idea for the '{category}' category.",
            system_instruction(category),
            IDEA_FALLBACK,
            temperature=0.9,
            top_p=0.95,
        )
        return GenerationResponse(category=category, text=text, remaining=remaining)

    async def mascot_tip(self) -> GenerationResponse:
        text = await self._generate(
            "Generate a helpful tip.", system_instruction("mascot"), MASCOT_FALLBACK, temperature=1.0
        )
        return GenerationResponse(category="mascot", text=text)

    async def dashboard_suggestion(self) -> GenerationResponse:
        summary = DashboardService(self.state).get_summary()
        if summary.totalClients == 0:
            return GenerationResponse(category="dashboard", text=NO_CLIENTS_SUGGESTION)
        text = await self._generate(
            f"Based on this summary, give me one great suggestion. Summary: {summary_text(summary)}",
            system_instruction("dashboard"),
            SUGGESTION_FALLBACK,
            temperature=0.8,
        )
        return GenerationResponse(category="dashboard", text=text)

    def get_usage(self) -> dict[str, int]:
        """Generations used today per limited category"""
        categories = get_args(MessageCategory) + get_args(IdeaCategory)
        return {c: self.limiter.get_usage(self.state.owner_id, c) for c in categories}

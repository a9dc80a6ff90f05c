from __future__ import annotations

import logging
import random
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from chatgpt_helper.llm import ChatGPTClient, ChatGPTError
from chatgpt_helper.llm.response import estimate_cost, response_text, total_tokens, usage
from chatgpt_helper.schema import ContentSeries, GeneratedContent, SeoReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentTemplate:
    prompt: str
    defaults: Mapping[str, str] = field(default_factory=dict)

    def render(self, params: Mapping[str, object]) -> str:
        # Unknown placeholders are left as-is.
        merged = {**self.defaults, **{k: str(v) for k, v in params.items()}}
        out = self.prompt
        for key, value in merged.items():
            out = out.replace("{" + key + "}", value)
        return out


def _template(prompt: str, **defaults: str) -> ContentTemplate:
    return ContentTemplate(prompt=prompt, defaults=MappingProxyType(defaults))


DEFAULT_TEMPLATES: Mapping[str, ContentTemplate] = MappingProxyType(
    {
        "blog_post": _template(
            "Write a {tone} blog post about '{topic}' for {audience}. Include an engaging title, introduction, "
            "{sections} main sections, and conclusion. Target length: {word_count} words.",
            tone="professional",
            audience="general readers",
            sections="3-4",
            word_count="800-1000",
        ),
        "product_description": _template(
            "Write a compelling product description for '{product_name}'. Highlight {key_features} key features, "
            "target {audience}, and include a call-to-action. Tone: {tone}. Length: {word_count} words.",
            tone="persuasive",
            audience="potential customers",
            key_features="3-5",
            word_count="150-200",
        ),
        "social_media": _template(
            "Create {platform} posts about '{topic}'. Generate {count} variations with {tone} tone. "
            "Include relevant hashtags and call-to-action where appropriate.",
            platform="LinkedIn",
            count="3",
            tone="engaging",
        ),
        "email_campaign": _template(
            "Write an email for '{campaign_type}' campaign. Subject: '{subject}'. Target audience: {audience}. "
            "Tone: {tone}. Include personalization placeholders and clear CTA.",
            campaign_type="newsletter",
            audience="subscribers",
            tone="friendly",
        ),
        "press_release": _template(
            "Write a press release about '{announcement}' for {company}. Include headline, dateline, body with "
            "quotes, and boilerplate. Follow AP style. Target length: {word_count} words.",
            company="our company",
            word_count="400-500",
        ),
    }
)

_NUMBERED_LINE = re.compile(r"^\s*\d+\.\s*(.+)$", flags=re.MULTILINE)


class ContentGenerator:
    """Templated content generation on top of stateless chat calls."""

    def __init__(
        self,
        client: ChatGPTClient,
        templates: Mapping[str, ContentTemplate] = DEFAULT_TEMPLATES,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.client = client
        self.templates = templates
        self._rng = rng or random.Random()

    def available_types(self) -> list[str]:
        return list(self.templates.keys())

    def template_info(self, content_type: str) -> ContentTemplate | None:
        return self.templates.get(content_type)

    def generate_content(self, content_type: str, **params: object) -> GeneratedContent:
        return self._generate(content_type, params, temperature=0.8)

    def generate_variations(self, content_type: str, count: int = 3, **params: object) -> list[GeneratedContent]:
        results: list[GeneratedContent] = []
        for i in range(1, count + 1):
            temperature = 0.7 + 0.2 * self._rng.randint(0, 10) / 10
            result = self._generate(content_type, params, temperature=temperature)
            result.variation = i
            results.append(result)
        return results

    def _generate(self, content_type: str, params: Mapping[str, object], *, temperature: float) -> GeneratedContent:
        template = self.templates.get(content_type)
        if template is None:
            raise ValueError(f"Unknown content type: {content_type}")

        prompt = template.render(params)
        self.client.set_temperature(temperature).set_max_tokens(1500)
        try:
            data = self.client.chat(prompt)
        except ChatGPTError as e:
            logger.warning("content generation failed (%s): %s", content_type, e)
            return GeneratedContent(success=False, type=content_type, parameters=dict(params), error=str(e))

        return GeneratedContent(
            success=True,
            type=content_type,
            content=response_text(data),
            parameters=dict(params),
            tokens_used=total_tokens(data),
            estimated_cost=estimate_cost(usage(data)),
        )

    def generate_series(self, topic: str, posts: int = 5) -> ContentSeries:
        """Outline a `posts`-part series, then write one blog post per outlined title."""
        outline_prompt = (
            f"Create an outline for a {posts}-part content series about '{topic}'. "
            f"List {posts} blog post titles that build upon each other logically. "
            "Each title should be engaging and SEO-friendly. Format as numbered list."
        )
        self.client.set_temperature(0.6).set_max_tokens(300)
        try:
            outline = response_text(self.client.chat(outline_prompt))
        except ChatGPTError as e:
            return ContentSeries(success=False, topic=topic, error=str(e))

        titles = [t.strip() for t in _NUMBERED_LINE.findall(outline) if t.strip()]
        series: list[GeneratedContent] = []
        for part, title in enumerate(titles, start=1):
            result = self.generate_content(
                "blog_post",
                topic=title,
                tone="informative",
                audience=f"professionals interested in {topic}",
                word_count="600-800",
            )
            result.series_part = part
            result.title = title
            series.append(result)
        return ContentSeries(success=True, topic=topic, outline=outline, posts=series)

    def optimize_for_seo(self, content: str, keyword: str) -> SeoReport:
        prompt = (
            f"Optimize this content for SEO with focus keyword '{keyword}':\n\n"
            f"{content}\n\n"
            "Provide:\n"
            "1. SEO-optimized title (include keyword)\n"
            "2. Meta description (150-160 chars, include keyword)\n"
            "3. 3-5 relevant hashtags\n"
            "4. Suggestions for internal linking opportunities\n"
            "5. Content improvements for better SEO"
        )
        self.client.set_temperature(0.3).set_max_tokens(800)
        try:
            data = self.client.chat(prompt)
        except ChatGPTError as e:
            return SeoReport(success=False, keyword=keyword, original_content=content, error=str(e))
        return SeoReport(
            success=True,
            keyword=keyword,
            original_content=content,
            recommendations=response_text(data),
            tokens_used=total_tokens(data),
        )

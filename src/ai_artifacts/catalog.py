"""
Template and model catalogs: read-only reference data.

Both are injected into the orchestrator; nothing here is mutated at runtime.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional

from ai_artifacts.models.catalog import LLMModel, Template

AUTO_TEMPLATE = "auto"

DEFAULT_TEMPLATES: dict[str, Template] = {
    "code-interpreter-multilang": Template(
        name="Python data analyst",
        lib=["python", "jupyter", "numpy", "pandas", "matplotlib", "seaborn", "plotly"],
        file="script.py",
        instructions="Runs code as a Jupyter notebook cell. Strong data analysis angle. "
                     "Can use complex visualisation to explain results.",
    ),
    "nextjs-developer": Template(
        name="Next.js developer",
        lib=["nextjs@14.2.5", "typescript", "@types/node", "@types/react", "@types/react-dom",
             "postcss", "tailwindcss", "shadcn"],
        file="pages/index.tsx",
        instructions="A Next.js 13+ app that reloads automatically. Using the pages router.",
        port=3000,
    ),
    "vue-developer": Template(
        name="Vue.js developer",
        lib=["vue@latest", "nuxt@3.13.0", "tailwindcss"],
        file="app.vue",
        instructions="A Vue.js 3+ app that reloads automatically. Only when asked specifically for a Vue app.",
        port=3000,
    ),
    "streamlit-developer": Template(
        name="Streamlit developer",
        lib=["streamlit", "pandas", "numpy", "matplotlib", "requests", "seaborn", "plotly"],
        file="app.py",
        instructions="A streamlit app that reloads automatically.",
        port=8501,
    ),
    "gradio-developer": Template(
        name="Gradio developer",
        lib=["gradio", "pandas", "numpy", "matplotlib", "requests", "seaborn", "plotly"],
        file="app.py",
        instructions="A gradio app. Gradio Blocks/Interface should be called demo.",
        port=7860,
    ),
}

DEFAULT_MODELS: tuple[LLMModel, ...] = (
    LLMModel(id="claude-3-5-sonnet-20240620", provider="Anthropic", provider_id="anthropic",
             name="Claude 3.5 Sonnet", multi_modal=True),
    LLMModel(id="claude-3-haiku-20240307", provider="Anthropic", provider_id="anthropic",
             name="Claude 3 Haiku", multi_modal=True),
    LLMModel(id="gpt-4o", provider="OpenAI", provider_id="openai", name="GPT-4o", multi_modal=True),
    LLMModel(id="gpt-4o-mini", provider="OpenAI", provider_id="openai", name="GPT-4o Mini", multi_modal=True),
    LLMModel(id="gemini-1.5-pro-002", provider="Google Generative AI", provider_id="google",
             name="Gemini 1.5 Pro", multi_modal=True),
    LLMModel(id="mistral-large-latest", provider="Mistral", provider_id="mistral", name="Mistral Large 2"),
    LLMModel(id="llama-3.1-70b-versatile", provider="Groq", provider_id="groq", name="LLaMA3.1 70B"),
    LLMModel(id="llama3.1", provider="Ollama", provider_id="ollama", name="LLaMA 3.1"),
)


class TemplateCatalog(Mapping[str, Template]):
    def __init__(self, templates: Optional[Mapping[str, Template]] = None):
        self._templates = MappingProxyType(dict(DEFAULT_TEMPLATES if templates is None else templates))

    def __getitem__(self, template_id: str) -> Template:
        return self._templates[template_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def select(self, selection: str = AUTO_TEMPLATE) -> dict[str, Any]:
        """Wire form of the selection: every template for ``auto``, else just the one."""
        if selection == AUTO_TEMPLATE:
            ids = list(self._templates)
        elif selection in self._templates:
            ids = [selection]
        else:
            raise KeyError(f"Unknown template: {selection}")
        return {tid: self._templates[tid].model_dump(exclude_none=True) for tid in ids}


class ModelCatalog:
    def __init__(self, models: Optional[tuple[LLMModel, ...]] = None):
        self._models = tuple(DEFAULT_MODELS if models is None else models)
        self._by_id = {m.id: m for m in self._models}

    def __iter__(self) -> Iterator[LLMModel]:
        return iter(self._models)

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._by_id

    def get(self, model_id: Optional[str]) -> Optional[LLMModel]:
        if model_id is None:
            return None
        return self._by_id.get(model_id)

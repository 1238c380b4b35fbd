"""GenUI Engine: persona-aware generative workspace layouts.

Subpackages:
    schema: Layout specification models and structural validation.
    knowledge: Static persona, exemplar, pattern, trace and rubric tables.
    retrieval: Deterministic lookups over the knowledge tables.
    prompt: Generation and evaluation prompt builders.
    llm: LLM backends and the interface generator.
    evaluation: Rubric-based interface evaluator.
    render: Layout tree to widget view tree (and Streamlit drawing).
    stats: Descriptive statistics and effect sizes.
    experiment: Three-condition comparison and batch experiments.
    app: Streamlit application.
"""

__version__ = "0.1.0"

"""Canned answers for two built-in research knowledge bases."""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from academic_assistant.qa.templates import predefined_annotation


@dataclass(frozen=True)
class PredefinedQA:
    question: str
    answer: str


@dataclass(frozen=True)
class KnowledgeBase:
    name: str
    document_name: str


@dataclass(frozen=True)
class PredefinedAnswer:
    """A matched canned answer and the knowledge base it is attributed to."""

    answer: str
    knowledge_base: KnowledgeBase

    @property
    def annotated_answer(self) -> str:
        return self.answer + predefined_annotation(self.knowledge_base.name)

    @property
    def source_excerpt(self) -> str:
        return f"Predefined answer from integrated {self.knowledge_base.name.lower()}"


ML_KNOWLEDGE_BASE = KnowledgeBase("ML Research Paper knowledge base", "ML Research Paper.pdf")
NUCLEAR_KNOWLEDGE_BASE = KnowledgeBase("Nuclear Physics knowledge base", "Nuclear Physics Paper.pdf")
INTEGRATED_KNOWLEDGE_BASE = KnowledgeBase("Integrated Research Knowledge Base", "Research Papers.pdf")

ML_RESEARCH_QA: Tuple[PredefinedQA, ...] = (
    PredefinedQA(
        "Difference between traditional programming and machine learning?",
        "In traditional programming, humans write explicit rules and logic (Program + Data → Output). "
        "In machine learning, the system learns rules automatically by analyzing patterns in data "
        "(Data + Output → Program). Thus, ML automates the process of creating programs.",
    ),
    PredefinedQA(
        "What are the main types of machine learning methods discussed in the paper?",
        "**Supervised Learning** – Uses labeled data to predict outcomes (e.g., fraud detection, spam filtering).\n\n"
        "**Unsupervised Learning** – Works on unlabeled data to find hidden structures (e.g., clustering customers).\n\n"
        "**Semi-Supervised Learning** – Uses a small set of labeled data with a large set of unlabeled data (cost-effective).\n\n"
        "**Reinforcement Learning** – Uses trial-and-error with rewards to learn the best actions (used in robotics, gaming, navigation).",
    ),
    PredefinedQA(
        "What are the three key elements of every machine learning algorithm?",
        "**Representation** – How knowledge is represented (decision trees, neural networks, SVMs, etc.).\n\n"
        "**Evaluation** – How models are judged (accuracy, recall, cost, etc.).\n\n"
        "**Optimization** – How models are improved (gradient descent, convex optimization, etc.).",
    ),
    PredefinedQA(
        "What real-world applications of machine learning are highlighted in the paper?",
        "• **Data security** (detecting malware, breaches)\n"
        "• **Financial trading** (predicting stock market trends)\n"
        "• **Healthcare** (early disease detection, risk prediction)\n"
        "• **Fraud detection** (PayPal, banking systems)\n"
        "• **Recommendation systems** (Netflix, Amazon)\n"
        "• **Natural Language Processing** (chatbots, translation)\n"
        "• **Smart cars and IoT** (autonomous vehicles)",
    ),
    PredefinedQA(
        "What are the main advantages of machine learning mentioned?",
        "• Identifies hidden trends & patterns in large datasets\n"
        "• Automation with minimal human intervention\n"
        "• Continuous improvement over time\n"
        "• Handles multi-dimensional, complex data effectively\n"
        "• Wide applications across industries",
    ),
    PredefinedQA(
        "What are some limitations or disadvantages of machine learning?",
        "• Requires large, unbiased datasets\n"
        "• Time and computationally expensive\n"
        "• Difficult to interpret complex models\n"
        "• Prone to bias and errors if training data is flawed",
    ),
    PredefinedQA(
        "Which programming languages are most used in machine learning according to the paper?",
        "• **Python** – General-purpose, flexible, widely used\n"
        "• **R** – Best for statistics and data analysis\n"
        "• **Java** – Used with big data tools like Hadoop, Kafka\n"
        "• **MATLAB** – Strong for numerical and engineering tasks\n"
        "• **Scala** – Functional + object-oriented, scalable\n"
        "• **C/C++** – For performance-heavy ML models\n"
        "• **SQL** – For handling large databases and ETL processes",
    ),
    PredefinedQA(
        "Which companies are highlighted as using ML, and how?",
        "• **Yelp** – Image classification\n"
        "• **Pinterest** – Content discovery & recommendation\n"
        "• **Facebook** – Chatbots & spam filtering\n"
        "• **Twitter** – Timeline curation\n"
        "• **Google** – DeepMind, NLP, search ranking\n"
        "• **HubSpot** – Predictive lead scoring\n"
        "• **IBM Watson** – Healthcare and business applications",
    ),
    PredefinedQA(
        "How does reinforcement learning differ from supervised learning?",
        "**Supervised Learning:** Learns from labeled data with known outcomes.\n\n"
        "**Reinforcement Learning:** Learns through trial and error, guided by rewards/punishments, "
        "without predefined \"correct\" answers.\n\n"
        "**Introduction**\n\n"
        "Machine Learning (ML) is a subset of Artificial Intelligence that enables systems to learn "
        "from data without explicit programming.\n\n"
        "It relies on algorithms and statistical models to detect patterns and make predictions.\n\n"
        "Applications span across healthcare, finance, security, robotics, marketing, and more.",
    ),
    PredefinedQA(
        "Summarize the document",
        "## Machine Learning (ML) Overview\n\n"
        "ML, a branch of AI, enables systems to learn from data and make predictions without explicit "
        "programming. It uses algorithms to detect patterns and improve performance.\n\n"
        "### Key Concepts\n"
        "• **Traditional vs ML:** In ML, data + output → machine learns rules\n"
        "• **Core Elements:** Representation, evaluation, optimization\n\n"
        "### Types of ML\n"
        "• **Supervised:** Learns from labeled data\n"
        "• **Unsupervised:** Finds patterns in unlabeled data\n"
        "• **Semi-Supervised:** Mix of both, cost-effective\n"
        "• **Reinforcement:** Learns via rewards/trial-and-error\n\n"
        "### Applications\n"
        "Security (malware detection), finance (fraud, trading), healthcare (diagnosis), marketing "
        "(recommendations), smart systems (self-driving, NLP), robotics, and more.\n\n"
        "### Pros\n"
        "• Pattern detection in big data\n"
        "• Reduces human effort\n"
        "• Continuous improvement\n"
        "• Handles complex data\n"
        "• Broad industry use\n\n"
        "### Cons\n"
        "• Requires large, unbiased data\n"
        "• High computational cost\n"
        "• Hard-to-interpret results\n"
        "• Error-prone with flawed data\n\n"
        "### Tools\n"
        "Popular languages: Python, R, Java, MATLAB, Scala, C/C++, SQL.\n\n"
        "### Companies Using ML\n"
        "Google, Facebook, Twitter, Pinterest, Yelp, IBM Watson, HubSpot.\n\n"
        "### Conclusion\n"
        "ML enhances decision-making, prediction, and automation. Supervised suits small datasets, "
        "unsupervised for large, and reinforcement for robotics. With deep learning, ML continues to "
        "transform industries and daily life.",
    ),
)

NUCLEAR_PHYSICS_QA: Tuple[PredefinedQA, ...] = (
    PredefinedQA(
        "What does nuclear physics study and what are its main applications?",
        "Nuclear physics studies the properties of atomic nuclei, the particles inside them, their "
        "interactions, radioactivity, and nuclear reactions. Applications include medical isotopes, "
        "MRI, material identification, carbon dating, power generation (fission & fusion), and nuclear weapons.",
    ),
    PredefinedQA(
        "What are the basic properties of nuclei?",
        "A nucleus consists of protons (positive) and neutrons (neutral). Isotopes have the same number "
        "of protons (Z) but different neutrons (N). Nuclear size is given by R = R₀A¹ᐟ³ with "
        "R₀ ≈ 1.2×10⁻¹⁵ m. Nuclear density is extremely high (~10¹⁷ kg/m³) and nearly constant for all nuclei.",
    ),
    PredefinedQA(
        "What is nuclear binding energy and why is it important?",
        "Nuclear binding energy is the energy gained when nucleons form a nucleus. The binding energy "
        "per nucleon is nearly constant, indicating the nuclear force is short-ranged and saturated. "
        "It measures nuclear stability: the higher the binding energy per nucleon, the more stable the nucleus.",
    ),
    PredefinedQA(
        "What are the characteristics of the nuclear force?",
        "The nuclear force is very strong and short-ranged (~10⁻¹⁵ m), independent of charge, and "
        "favors spin-paired nucleons. It is saturated, meaning each nucleon interacts mainly with its "
        "nearest neighbors.",
    ),
    PredefinedQA(
        "What is radioactivity and what are its types?",
        "Radioactivity is the spontaneous emission of particles or radiation from unstable nuclei. Types include:\n"
        "- Alpha decay: emission of a ²⁴He nucleus\n"
        "- Beta decay: β⁻ (n → p + e⁻ + ν̅), β⁺ (p → n + e⁺ + ν)\n"
        "- Electron capture: p + e⁻ → n + ν\n"
        "- Gamma decay: emission of high-energy photons\n"
        "Radioactive decay is statistical, characterized by decay constant (λ), half-life (T₁/₂), and mean life (τ).",
    ),
    PredefinedQA(
        "What are nuclear reactions and what is the Q-value?",
        "Nuclear reactions involve rearrangement of nucleons by bombardment. The Q-value determines if a "
        "reaction is exoergic (Q>0) or endoergic (Q<0). Neutron-induced reactions are used in fission, "
        "fusion, and analysis (e.g., neutron activation analysis).",
    ),
    PredefinedQA(
        "Explain nuclear fission and its use in reactors.",
        "Fission is the splitting of heavy nuclei (e.g., U-235) into lighter nuclei, releasing neutrons "
        "and about 200 MeV of energy. A chain reaction is sustained if the reproduction constant k ≈ 1. "
        "Nuclear reactors use moderators (to slow neutrons) and control rods (to absorb excess neutrons) "
        "to control the reaction.",
    ),
    PredefinedQA(
        "What is nuclear fusion and why is it important?",
        "Fusion is the combination of light nuclei (e.g., D + T) to form He-4 and a neutron, releasing "
        "17.6 MeV. Fusion releases more energy per nucleon than fission and uses abundant, clean fuel, "
        "but requires extremely high temperatures (T > 10⁷ K) and plasma confinement. Fusion powers the sun.",
    ),
    PredefinedQA(
        "How does Carbon-14 dating work?",
        "Living organisms maintain a fixed ratio of ¹⁴C/¹²C. After death, ¹⁴C decays (T₁/₂ = 5730 years). "
        "Measuring the reduced ratio in remains reveals their age. Activity is measured in curie (Ci).",
    ),
    PredefinedQA(
        "Summarize the differences between fission and fusion, and their significance.",
        "Fission splits heavy nuclei into medium-mass nuclei and energy (e.g., U-235), used in reactors "
        "and weapons. Fusion combines light nuclei into heavier ones, releasing more energy per nucleon "
        "(e.g., D + T → He), with cleaner fuel and less radioactive waste. Fusion is more promising for "
        "future power but is technologically challenging.",
    ),
)

# Substring keys checked in order, ML first
ML_KEYWORD_MATCHES: Tuple[Tuple[str, int], ...] = (
    ("traditional programming", 0),
    ("difference between traditional", 0),
    ("traditional vs machine learning", 0),
    ("traditional vs ml", 0),
    ("types of machine learning", 1),
    ("kinds of machine learning", 1),
    ("main types", 1),
    ("supervised unsupervised", 1),
    ("three key elements", 2),
    ("key elements", 2),
    ("representation evaluation optimization", 2),
    ("real-world applications", 3),
    ("applications of machine learning", 3),
    ("applications highlighted", 3),
    ("use cases", 3),
    ("advantages of machine learning", 4),
    ("benefits of machine learning", 4),
    ("main advantages", 4),
    ("pros of machine learning", 4),
    ("limitations", 5),
    ("disadvantages", 5),
    ("cons of machine learning", 5),
    ("problems with machine learning", 5),
    ("programming languages", 6),
    ("languages used", 6),
    ("python r java", 6),
    ("most used languages", 6),
    ("companies using ml", 7),
    ("companies highlighted", 7),
    ("google facebook twitter", 7),
    ("which companies", 7),
    ("reinforcement learning differ", 8),
    ("reinforcement vs supervised", 8),
    ("difference reinforcement", 8),
    ("summarize", 9),
    ("summary", 9),
    ("overview", 9),
    ("summarize the document", 9),
    ("give me a summary", 9),
    ("what is this document about", 9),
)

NUCLEAR_KEYWORD_MATCHES: Tuple[Tuple[str, int], ...] = (
    ("nuclear physics study", 0),
    ("what does nuclear physics", 0),
    ("nuclear physics applications", 0),
    ("applications of nuclear physics", 0),
    ("basic properties of nuclei", 1),
    ("properties of nuclei", 1),
    ("nuclear properties", 1),
    ("protons neutrons", 1),
    ("isotopes", 1),
    ("nuclear size", 1),
    ("nuclear density", 1),
    ("nuclear binding energy", 2),
    ("binding energy", 2),
    ("nuclear stability", 2),
    ("binding energy per nucleon", 2),
    ("nuclear force", 3),
    ("characteristics of nuclear force", 3),
    ("strong force", 3),
    ("short-ranged force", 3),
    ("radioactivity", 4),
    ("types of radioactivity", 4),
    ("alpha decay", 4),
    ("beta decay", 4),
    ("gamma decay", 4),
    ("radioactive decay", 4),
    ("half-life", 4),
    ("nuclear reactions", 5),
    ("q-value", 5),
    ("exoergic endoergic", 5),
    ("neutron-induced reactions", 5),
    ("nuclear fission", 6),
    ("fission", 6),
    ("nuclear reactors", 6),
    ("chain reaction", 6),
    ("u-235", 6),
    ("uranium-235", 6),
    ("moderators control rods", 6),
    ("nuclear fusion", 7),
    ("fusion", 7),
    ("deuterium tritium", 7),
    ("plasma confinement", 7),
    ("fusion energy", 7),
    ("sun energy", 7),
    ("carbon-14 dating", 8),
    ("carbon dating", 8),
    ("c-14 dating", 8),
    ("radiocarbon dating", 8),
    ("age determination", 8),
    ("fission vs fusion", 9),
    ("difference between fission and fusion", 9),
    ("fission fusion comparison", 9),
    ("nuclear energy comparison", 9),
)

ML_TOPIC_KEYWORDS = (
    "machine learning", "ml", "supervised", "unsupervised", "reinforcement",
    "algorithm", "traditional programming", "representation", "evaluation",
    "optimization", "neural networks", "deep learning", "artificial intelligence",
    "ai", "data science", "python", "applications", "advantages", "disadvantages",
)

NUCLEAR_TOPIC_KEYWORDS = (
    "nuclear", "nuclei", "nucleus", "fission", "fusion", "radioactive", "radioactivity",
    "alpha decay", "beta decay", "gamma decay", "binding energy", "nuclear force",
    "proton", "neutron", "isotope", "uranium", "plutonium", "carbon-14", "c-14",
    "half-life", "decay constant", "nuclear reactor", "chain reaction", "moderator",
    "control rod", "q-value", "exoergic", "endoergic", "deuterium", "tritium",
    "plasma", "nuclear physics", "atomic nucleus", "nuclear reaction",
)


def word_overlap(first: str, second: str) -> float:
    """Share of words (longer than two characters) the two strings have in common."""
    words1 = [w for w in first.split() if len(w) > 2]
    words2 = [w for w in second.split() if len(w) > 2]
    if not words1 or not words2:
        return 0.0
    common = sum(1 for w in words1 if w in words2)
    return common / max(len(words1), len(words2))


class PredefinedAnswerMatcher:
    """Matches questions against the built-in canned Q&A tables."""

    def __init__(
        self,
        ml_qa: Sequence[PredefinedQA] = ML_RESEARCH_QA,
        nuclear_qa: Sequence[PredefinedQA] = NUCLEAR_PHYSICS_QA,
        similarity_threshold: float = 0.8,
    ):
        """
        Initialize matcher.

        Args:
            ml_qa: Machine learning Q&A table
            nuclear_qa: Nuclear physics Q&A table
            similarity_threshold: Minimum word overlap for whole-question matches
        """
        self.ml_qa = tuple(ml_qa)
        self.nuclear_qa = tuple(nuclear_qa)
        self.similarity_threshold = similarity_threshold

    def find_answer(self, question: str) -> Optional[str]:
        """
        Return the canned answer text for a question, or None.

        Substring keys are tried first (ML table, then nuclear physics);
        otherwise the most similar canned question above the threshold wins.
        """
        lowered = question.lower().strip()

        for key, index in ML_KEYWORD_MATCHES:
            if key in lowered:
                return self.ml_qa[index].answer
        for key, index in NUCLEAR_KEYWORD_MATCHES:
            if key in lowered:
                return self.nuclear_qa[index].answer

        best_answer = None
        best_score = 0.0
        for qa in self.ml_qa + self.nuclear_qa:
            score = word_overlap(lowered, qa.question.lower())
            if score >= self.similarity_threshold and score > best_score:
                best_answer = qa.answer
                best_score = score
        return best_answer

    def find(self, question: str) -> Optional[PredefinedAnswer]:
        """Match a question and attribute the answer to a knowledge base."""
        answer = self.find_answer(question)
        if answer is None:
            return None
        return PredefinedAnswer(answer=answer, knowledge_base=self.knowledge_base_for(question))

    @staticmethod
    def knowledge_base_for(question: str) -> KnowledgeBase:
        lowered = question.lower()
        is_ml = any(k in lowered for k in ML_TOPIC_KEYWORDS)
        is_nuclear = any(k in lowered for k in NUCLEAR_TOPIC_KEYWORDS)
        if is_ml and not is_nuclear:
            return ML_KNOWLEDGE_BASE
        if is_nuclear and not is_ml:
            return NUCLEAR_KNOWLEDGE_BASE
        return INTEGRATED_KNOWLEDGE_BASE

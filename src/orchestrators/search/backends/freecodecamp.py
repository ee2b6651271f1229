"""freeCodeCamp backend: keyword match against the static curriculum catalog (no network)."""

from collections.abc import Sequence

from src.contracts.resource_v1 import FreeCodeCampItem, Platform
from src.orchestrators.search.interface import SourceAdapter

FCC_LEARN = "https://www.freecodecamp.org/learn"

CURRICULUM: tuple[FreeCodeCampItem, ...] = (
    FreeCodeCampItem(
        title="Responsive Web Design",
        description="Learn HTML and CSS by building web pages, then make them responsive with flexbox and grid.",
        url=f"{FCC_LEARN}/2022/responsive-web-design/",
        keywords=("html", "css", "flexbox", "grid", "responsive", "web design", "accessibility"),
    ),
    FreeCodeCampItem(
        title="JavaScript Algorithms and Data Structures",
        description="Learn JavaScript fundamentals, ES6, regular expressions, debugging, and algorithm scripting.",
        url=f"{FCC_LEARN}/javascript-algorithms-and-data-structures-v8/",
        keywords=("javascript", "js", "es6", "algorithms", "data structures", "regex", "debugging"),
    ),
    FreeCodeCampItem(
        title="Front End Development Libraries",
        description="Learn Bootstrap, jQuery, Sass, React and Redux by building front end projects.",
        url=f"{FCC_LEARN}/front-end-development-libraries/",
        keywords=("react", "redux", "bootstrap", "jquery", "sass", "frontend", "front end"),
    ),
    FreeCodeCampItem(
        title="Data Visualization",
        description="Build charts, graphs and maps with D3.js and work with JSON APIs and AJAX.",
        url=f"{FCC_LEARN}/data-visualization/",
        keywords=("d3", "data visualization", "charts", "svg", "json", "ajax"),
    ),
    FreeCodeCampItem(
        title="Relational Database",
        description="Learn Bash, SQL, PostgreSQL and Git by building projects in a real development environment.",
        url=f"{FCC_LEARN}/relational-database/",
        keywords=("sql", "postgresql", "postgres", "database", "bash", "git", "linux"),
    ),
    FreeCodeCampItem(
        title="Back End Development and APIs",
        description="Write back end apps with Node.js and npm, build APIs with Express, and store data with MongoDB.",
        url=f"{FCC_LEARN}/back-end-development-and-apis/",
        keywords=("node", "node.js", "express", "mongodb", "mongoose", "npm", "api", "backend", "back end"),
    ),
    FreeCodeCampItem(
        title="Quality Assurance",
        description="Write functional and unit tests with Chai, and build secure apps with Node and Express.",
        url=f"{FCC_LEARN}/quality-assurance/",
        keywords=("testing", "chai", "unit tests", "qa", "quality assurance", "pug", "passport"),
    ),
    FreeCodeCampItem(
        title="Scientific Computing with Python",
        description="Learn Python fundamentals: variables, loops, functions, classes, and algorithms.",
        url=f"{FCC_LEARN}/scientific-computing-with-python/",
        keywords=("python", "oop", "algorithms", "scientific computing", "beginner"),
    ),
    FreeCodeCampItem(
        title="Data Analysis with Python",
        description="Read and analyze data with NumPy, Pandas, Matplotlib and Seaborn.",
        url=f"{FCC_LEARN}/data-analysis-with-python/",
        keywords=("python", "pandas", "numpy", "matplotlib", "seaborn", "data analysis", "data science"),
    ),
    FreeCodeCampItem(
        title="Information Security",
        description="Build secure web apps with HelmetJS and learn penetration testing with Python.",
        url=f"{FCC_LEARN}/information-security/",
        keywords=("security", "infosec", "helmet", "penetration testing", "cybersecurity"),
    ),
    FreeCodeCampItem(
        title="Machine Learning with Python",
        description="Learn TensorFlow and build neural networks, then apply machine learning to real projects.",
        url=f"{FCC_LEARN}/machine-learning-with-python/",
        keywords=("machine learning", "ml", "tensorflow", "neural networks", "deep learning", "ai", "python"),
    ),
    FreeCodeCampItem(
        title="College Algebra with Python",
        description="Learn algebra concepts and apply them with Python in Jupyter notebooks.",
        url=f"{FCC_LEARN}/college-algebra-with-python/",
        keywords=("algebra", "math", "python", "jupyter"),
    ),
    FreeCodeCampItem(
        title="Foundational C# with Microsoft",
        description="Learn the fundamentals of C# and .NET with Microsoft's certification curriculum.",
        url=f"{FCC_LEARN}/foundational-c-sharp-with-microsoft/",
        keywords=("c#", "csharp", ".net", "dotnet", "microsoft"),
    ),
    FreeCodeCampItem(
        title="The Odin Project - freeCodeCamp Remix",
        description="A full-stack curriculum covering HTML, CSS, JavaScript, Git and the command line.",
        url=f"{FCC_LEARN}/the-odin-project/",
        keywords=("full stack", "fullstack", "javascript", "html", "css", "git", "web development"),
    ),
    FreeCodeCampItem(
        title="Coding Interview Prep",
        description="Practice algorithms, data structures, and take-home projects for technical interviews.",
        url=f"{FCC_LEARN}/coding-interview-prep/",
        keywords=("interview", "algorithms", "data structures", "leetcode", "coding interview"),
    ),
)


def _matches(item: FreeCodeCampItem, terms: Sequence[str]) -> bool:
    haystack = " ".join((item.title, item.description, *item.keywords)).lower()
    return any(t in haystack for t in terms)


class FreeCodeCampSearchBackend(SourceAdapter):
    def __init__(self, catalog: Sequence[FreeCodeCampItem] = CURRICULUM):
        self._catalog = tuple(catalog)

    async def search(
        self,
        keywords: Sequence[str],
        query: str,
        limit: int = 10,
    ) -> list[FreeCodeCampItem]:
        terms = [k.lower().strip() for k in keywords if k.strip()] or query.lower().split()
        if not terms:
            return []
        return [item for item in self._catalog if _matches(item, terms)][:limit]

    def get_source_name(self) -> Platform:
        return Platform.FREECODECAMP

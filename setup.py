from setuptools import find_namespace_packages, setup

TEST_REQUIRES = [
    "pytest>=8.0",
    "httpx>=0.27",  # fastapi.testclient
]

setup(
    name="movie-discovery",
    version="0.1.0",
    description=(
        "Full-length movie search on YouTube (API key pool, TTL cache) with OMDb "
        "metadata enrichment and OMDb fallback; CLI + FastAPI server."
    ),
    license="MIT",
    packages=find_namespace_packages(include=("movie_discovery", "server", "server.*")),
    install_requires=[
        # Núcleo: config (.env), HTTP a YouTube/OMDb, tipos de la fachada de logging
        "python-dotenv>=1.0",
        "requests>=2.31",
        "urllib3>=2.0",
        "typing_extensions>=4.9",
        # Servidor HTTP
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
    ],
    extras_require={
        "test": TEST_REQUIRES,
        "dev": TEST_REQUIRES
        + [
            "black>=24.0",
            "ruff>=0.6",
            "mypy>=1.8",
            "types-requests>=2.31",
        ],
    },
    entry_points={
        "console_scripts": [
            "movie-search=movie_discovery.main:start",
            "start-server=server.__main__:main",
        ]
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Environment :: Web Environment",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Topic :: Multimedia :: Video",
    ],
)

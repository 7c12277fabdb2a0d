from enum import Enum

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "plugin": "ssrdeploy.plugin",
    "plg": "ssrdeploy.plugin",
    "conf": "ssrdeploy.config",
    "proc": "ssrdeploy.process",
    "install": "ssrdeploy.builder.install",
    "build": "ssrdeploy.builder.build",
    "bld": "ssrdeploy.builder.build",
    "adapt": "ssrdeploy.builder.adapter",
    "deploy": "ssrdeploy.builder.deploy",
    "nuxt": "ssrdeploy.bases.nuxt",
    "fn": "ssrdeploy.bases.function",
    "pipe": "ssrdeploy.pipeline",
}

# Top-level modules within ssrdeploy for auto-prefixing
KNOWN_TOP_MODULES = {
    "builder",
    "bases",
    "datacls",
    "utils",
    "config",
    "plugin",
    "process",
    "pipeline",
}

LOG_LEVELS_ENV = "SSRDEPLOY_LOG_LEVELS"
ENV_ID_ENV = "SSRDEPLOY_ENV_ID"


# --- Filenames and Paths ---
MANIFEST_FILENAME = "package.json"
DEFAULT_CONFIG_FILENAME = "ssrdeploy.yml"
DEFAULT_OUTPUT_DIR = ".ssrdeploy"
FUNCTION_MANIFEST_FILENAME = "function.yml"
HANDLER_FILENAME = "index.js"
HANDLER_ENTRY = "index.main"
TEMP_PREFIX = "ssrdeploy-"

# Files and directories copied from a Nuxt project into the function root
NUXT_ARTIFACTS = (".nuxt", "static", "nuxt.config.js", "package.json")


# --- Function runtime enumerations ---
RUNTIMES = ("Nodejs10.15", "Nodejs8.9")
MEMORY_SIZES = (128, 256, 512, 1024, 2048)
TIMEOUT_RANGE = (1, 60)


# --- Default plugin inputs ---
DEFAULT_INPUTS = {
    "entry": "./",
    "path": "/nuxt-ssr",
    "name": "nuxt-ssr",
    "installCommand": "npm install",
    "buildCommand": "npm run build",
    "runtime": RUNTIMES[0],
    "memory": MEMORY_SIZES[0],
    "timeout": 5,
    "envVariables": {},
}

DEFAULT_BUILDER = "ssrdeploy.bases.nuxt:NuxtBuilder"
DEFAULT_PACKAGER = "ssrdeploy.bases.function:LocalFunctionPackager"


# --- Lifecycle ---
class Stage(str, Enum):
    """Externally triggered lifecycle phases, in execution order."""
    INIT = "init"
    BUILD = "build"
    COMPILE = "compile"
    DEPLOY = "deploy"
    REMOVE = "remove"


class LifecycleState(str, Enum):
    CREATED = "created"
    INITIALIZED = "initialized"
    BUILT = "built"
    COMPILED = "compiled"
    DEPLOYED = "deployed"
    REMOVED = "removed"
    FAILED = "failed"


TERMINAL_STATES = {LifecycleState.REMOVED, LifecycleState.FAILED}

# stage -> (required state, state after success); None means any non-terminal state
STAGE_TRANSITIONS = {
    Stage.INIT: (LifecycleState.CREATED, LifecycleState.INITIALIZED),
    Stage.BUILD: (LifecycleState.INITIALIZED, LifecycleState.BUILT),
    Stage.COMPILE: (LifecycleState.BUILT, LifecycleState.COMPILED),
    Stage.DEPLOY: (LifecycleState.COMPILED, LifecycleState.DEPLOYED),
    Stage.REMOVE: (None, LifecycleState.REMOVED),
}

DEFAULT_STAGES = (Stage.INIT, Stage.BUILD, Stage.COMPILE, Stage.DEPLOY)


# --- CI pipeline ---
PIPELINE_WORKSPACE = "/workspace/app"
PIPELINE_ARCHIVE_NAME = "source.zip"
PIPELINE_SECRET_ID = "TCB_SECRET_ID"
PIPELINE_SECRET_KEY = "TCB_SECRET_KEY"

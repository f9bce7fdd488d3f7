# /nftdex/core/artifacts.py
# Resolves contract names to ABI + bytecode from the contracts project's build output.
import json
import os
from pathlib import Path
from typing import Any, Dict, List

import aiofiles
from pydantic import BaseModel, ConfigDict

from nftdex.core.errors import ArtifactInvalidError, ArtifactNotFoundError
from nftdex.core.logger import get_logger

log = get_logger(__name__)

# Source files tried, in order, when the caller does not name one.
COMMON_SOURCE_NAMES = ["src", "contracts", "StandardNFT", "Pair", "PairFactory", "LPToken"]


class ContractArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    contract_name: str
    source_name: str
    abi: List[Dict[str, Any]]
    bytecode: str


def extract_bytecode(artifact: Dict[str, Any]) -> str | None:
    """Handle Hardhat (string), Foundry (``{"object": ...}``) and raw solc (``evm.bytecode.object``) layouts."""
    bytecode = artifact.get("bytecode")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")
    if not bytecode:
        bytecode = ((artifact.get("evm") or {}).get("bytecode") or {}).get("object")
    if not isinstance(bytecode, str):
        return None
    bytecode = bytecode if bytecode.startswith("0x") else "0x" + bytecode
    return bytecode if len(bytecode) > 2 else None


class ArtifactLoader:
    def __init__(self, artifacts_dir: str):
        self.artifacts_dir = Path(artifacts_dir)
        self._cache: Dict[str, ContractArtifact] = {}
        log.info("ARTIFACT_LOADER_INITIALIZED", artifacts_dir=str(self.artifacts_dir))

    def candidate_paths(self, contract_name: str, source_name: str | None = None) -> List[Path]:
        sources = [source_name] if source_name else [contract_name, *COMMON_SOURCE_NAMES]
        paths = []
        for src in sources:
            src = src[:-4] if src.endswith(".sol") else src
            paths.append(self.artifacts_dir / f"{src}.sol" / f"{contract_name}.json")
            paths.append(self.artifacts_dir / src / f"{contract_name}.json")
        # Preserve order, drop duplicates from overlapping names.
        return list(dict.fromkeys(paths))

    async def load(self, contract_name: str, source_name: str | None = None) -> ContractArtifact:
        cache_key = f"{contract_name}_{source_name}" if source_name else contract_name
        cached = self._cache.get(cache_key)
        if cached is not None:
            log.debug("ARTIFACT_CACHE_HIT", contract=contract_name, source=source_name)
            return cached

        artifact = await self._load_from_disk(contract_name, source_name)
        # Concurrent first loads may both reach here; artifacts are immutable so last write wins.
        self._cache[cache_key] = artifact
        log.info(
            "ARTIFACT_LOADED",
            contract=artifact.contract_name,
            source=artifact.source_name,
            bytecode_length=len(artifact.bytecode),
            abi_length=len(artifact.abi),
        )
        return artifact

    async def _load_from_disk(self, contract_name: str, source_name: str | None) -> ContractArtifact:
        problems = []
        for path in self.candidate_paths(contract_name, source_name):
            if not path.is_file():
                continue
            try:
                async with aiofiles.open(path, "r", encoding="utf-8") as f:
                    data = json.loads(await f.read())
            except (OSError, ValueError) as e:
                log.warning("ARTIFACT_UNREADABLE", path=str(path), error=str(e))
                problems.append(f"{path}: {e}")
                continue

            abi = data.get("abi") if isinstance(data, dict) else None
            bytecode = extract_bytecode(data) if isinstance(data, dict) else None
            if not isinstance(abi, list) or bytecode is None:
                log.warning("ARTIFACT_INVALID", path=str(path))
                problems.append(f"{path}: missing abi or bytecode")
                continue

            return ContractArtifact(
                contract_name=data.get("contractName") or contract_name,
                source_name=data.get("sourceName") or path.parent.name,
                abi=abi,
                bytecode=bytecode,
            )

        where = f" in {source_name}" if source_name else ""
        if problems:
            raise ArtifactInvalidError(f"Invalid artifact for {contract_name}{where}: " + "; ".join(problems))
        raise ArtifactNotFoundError(f"Contract artifact not found for {contract_name}{where}")

    def list_available(self) -> List[str]:
        if not self.artifacts_dir.is_dir():
            log.warning("ARTIFACTS_DIR_MISSING", artifacts_dir=str(self.artifacts_dir))
            return []
        names = set()
        for entry in os.scandir(self.artifacts_dir):
            if not entry.is_dir():
                continue
            for file in os.scandir(entry.path):
                if file.is_file() and file.name.endswith(".json"):
                    names.add(file.name[: -len(".json")])
        return sorted(names)

    def clear_cache(self):
        self._cache.clear()
        log.info("ARTIFACT_CACHE_CLEARED")

    def cache_status(self) -> Dict[str, Any]:
        return {"size": len(self._cache), "keys": list(self._cache.keys())}

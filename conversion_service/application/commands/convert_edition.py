"""ConvertEdition Command - Orchestrates end-to-end edition conversion.

Download the PDF, rasterize it, render and publish every page variant on a
bounded worker pool, then build and publish the manifest. Collaborators are
injected so tests can substitute any of them.
"""
from __future__ import annotations

import logging
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from contextlib import AbstractContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from conversion_service.application.dto.conversion_dto import ConversionResultDTO
from conversion_service.config import ConversionConfig
from conversion_service.domain.entities.conversion_request import ConversionRequest, StorageCredentials
from conversion_service.domain.entities.page_assets import AssetRecord, PageManifestEntry
from conversion_service.domain.entities.raster_page import RasterPage
from conversion_service.domain.exceptions import ConversionError
from conversion_service.domain.services.manifest_builder import Clock, ManifestBuilder
from conversion_service.domain.value_objects.conversion_stage import ConversionStage
from conversion_service.domain.value_objects.storage_path import page_asset_path
from conversion_service.domain.value_objects.variant_spec import VariantSpec, ensure_unique_keys
from conversion_service.infrastructure.filesystem.workspace import conversion_workspace
from conversion_service.infrastructure.storage.asset_publisher import AssetPublisher, StorageBackend

logger = logging.getLogger(__name__)


class Downloader(Protocol):
    def download(self, url: str, destination: Path) -> Path: ...

class Rasterizer(Protocol):
    def rasterize(self, pdf_path: Path, output_dir: Path) -> List[RasterPage]: ...

class Renderer(Protocol):
    def open_page(self, page: RasterPage): ...

    def render(self, image, spec: VariantSpec, page_number: int): ...


StorageFactory = Callable[[StorageCredentials], StorageBackend]
WorkspaceFactory = Callable[[], AbstractContextManager]


@dataclass(frozen=True)
class ConvertEditionCommand:
    request: ConversionRequest


@dataclass(frozen=True)
class ConversionPlan:
    """Request parameters with configuration defaults applied."""

    edition_id: str
    bucket: str
    variants: Tuple[VariantSpec, ...]
    thumbnail: VariantSpec

    @property
    def specs(self) -> Tuple[VariantSpec, ...]:
        return (*self.variants, self.thumbnail)


class ConversionProgress:
    """Tracks and logs the stage a single conversion has reached."""

    def __init__(self, edition_id: str) -> None:
        self.edition_id = edition_id
        self.stage = ConversionStage.RECEIVED

    def advance(self, new_stage: ConversionStage) -> None:
        if not self.stage.can_transition_to(new_stage):
            raise ValueError(f"Invalid stage transition from {self.stage.value} to {new_stage.value}")
        self.stage = new_stage
        logger.info(
            "Conversion %s reached %s",
            self.edition_id,
            new_stage.value,
            extra={"edition_id": self.edition_id, "stage": new_stage.value},
        )

    def fail(self, exc: BaseException) -> None:
        failed_at = self.stage
        self.stage = ConversionStage.FAILED
        kind = exc.kind.value if isinstance(exc, ConversionError) else "internal"
        if isinstance(exc, ConversionError):
            exc.stage = failed_at.value
        logger.error(
            "Conversion %s failed after %s: %s",
            self.edition_id,
            failed_at.value,
            exc,
            exc_info=not isinstance(exc, ConversionError),
            extra={"edition_id": self.edition_id, "stage": failed_at.value, "error_kind": kind},
        )


class ConvertEditionHandler:
    """Handles ConvertEdition commands."""

    def __init__(
        self,
        config: ConversionConfig,
        downloader: Downloader,
        rasterizer: Rasterizer,
        renderer: Renderer,
        storage_factory: StorageFactory,
        *,
        clock: Optional[Clock] = None,
        workspace_factory: WorkspaceFactory = conversion_workspace,
    ):
        self._config = config
        self._downloader = downloader
        self._rasterizer = rasterizer
        self._renderer = renderer
        self._storage_factory = storage_factory
        self._clock = clock
        self._workspace = workspace_factory

    def handle(self, command: ConvertEditionCommand) -> ConversionResultDTO:
        request = command.request
        progress = ConversionProgress(request.edition_id)
        try:
            plan = self.plan(request)
            progress.advance(ConversionStage.VALIDATED)
            result = self._convert(plan, request, progress)
        except BaseException as exc:
            progress.fail(exc)
            raise
        progress.advance(ConversionStage.COMPLETED)
        return result

    def plan(self, request: ConversionRequest) -> ConversionPlan:
        """Validate ``request`` and apply configured defaults."""
        request.validate()
        variants = request.variants if request.variants is not None else self._config.variants
        thumbnail = request.thumbnail or self._config.thumbnail
        ensure_unique_keys([*variants, thumbnail])
        return ConversionPlan(
            edition_id=request.edition_id,
            bucket=request.bucket or self._config.default_bucket,
            variants=tuple(variants),
            thumbnail=thumbnail,
        )

    def _convert(
        self,
        plan: ConversionPlan,
        request: ConversionRequest,
        progress: ConversionProgress,
    ) -> ConversionResultDTO:
        publisher = AssetPublisher(self._storage_factory(request.storage))

        with self._workspace() as workspace:
            workspace = Path(workspace)
            pdf_path = self._downloader.download(request.pdf_url, workspace / f"{uuid.uuid4()}.pdf")
            progress.advance(ConversionStage.DOWNLOADED)

            pages = self._rasterizer.rasterize(pdf_path, workspace / "png")
            progress.advance(ConversionStage.RASTERIZED)

            entries = self._publish_pages(plan, pages, publisher)
            progress.advance(ConversionStage.PAGES_PUBLISHED)

            builder = ManifestBuilder(thumbnail_key=plan.thumbnail.key, clock=self._clock)
            manifest = builder.build(
                plan.edition_id,
                plan.bucket,
                publisher.assets_base_url(plan.bucket),
                entries,
            )
            progress.advance(ConversionStage.MANIFEST_BUILT)

            manifest_record = publisher.publish_manifest(plan.bucket, manifest)
            progress.advance(ConversionStage.MANIFEST_PUBLISHED)

        return ConversionResultDTO.from_entries(
            plan.edition_id,
            plan.bucket,
            manifest_record.storage_path,
            entries,
        )

    def _publish_pages(
        self,
        plan: ConversionPlan,
        pages: Sequence[RasterPage],
        publisher: AssetPublisher,
    ) -> List[PageManifestEntry]:
        workers = max(1, min(self._config.page_workers, len(pages)))
        entries: List[PageManifestEntry] = []

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="page-worker") as executor:
            futures: Dict[Future, int] = {
                executor.submit(self._publish_page, plan, page, publisher): page.page_number
                for page in pages
            }
            try:
                for future in as_completed(futures):
                    entries.append(future.result())
            except BaseException:
                # Pages that have not started yet are dropped; running ones finish.
                for future in futures:
                    future.cancel()
                raise

        entries.sort(key=lambda entry: entry.page_number)
        return entries

    def _publish_page(
        self,
        plan: ConversionPlan,
        page: RasterPage,
        publisher: AssetPublisher,
    ) -> PageManifestEntry:
        image = self._renderer.open_page(page)
        page = page.with_dimensions(*image.size)
        assets: Dict[str, AssetRecord] = {}
        try:
            for spec in plan.specs:
                variant = self._renderer.render(image, spec, page.page_number)
                storage_path = page_asset_path(plan.edition_id, spec.key, page.page_number)
                assets[spec.key] = publisher.publish(
                    plan.bucket,
                    storage_path,
                    variant.data,
                    variant.content_type,
                )
        finally:
            image.close()

        logger.debug("Published %s variants for page %s", len(assets), page.page_number)
        return PageManifestEntry(page_number=page.page_number, width=page.width, height=page.height, assets=assets)

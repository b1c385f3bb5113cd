"""Scene pipeline: resolve assets, compose segments, concatenate in order."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

from .config import Config, config as default_config
from .editor.composer import SceneComposer, scene_token
from .editor.concat import SegmentConcatenator
from .errors import AssetResolutionError, MissingAssetError
from .models import (
    FinalVideo,
    RenderRun,
    RunState,
    SceneInput,
    SceneVideoSegment,
    parse_asset_location,
)
from .services.assets import AssetResolver, ResolvedAsset

logger = logging.getLogger(__name__)


class ScenePipeline:
    """Turns an ordered list of scenes into one final video.

    Scenes are composed strictly in order by default. With more than one
    worker, scenes are composed concurrently but segments are still
    returned and concatenated in input order.
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        work_dir: Optional[Path] = None,
        resolver: Optional[AssetResolver] = None,
        composer: Optional[SceneComposer] = None,
        concatenator: Optional[SegmentConcatenator] = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Configuration. Defaults to the global config.
            work_dir: Working directory override.
            resolver: Asset resolver. Created if not provided.
            composer: Scene composer. Created if not provided.
            concatenator: Segment concatenator. Created if not provided.
        """
        self._settings = settings or default_config
        self._settings.validate_settings()

        self.work_dir = Path(work_dir or self._settings.work_dir)
        self.asset_root = self._settings.workspace
        self.resolver = resolver or AssetResolver(timeout=self._settings.download_timeout)
        self.composer = composer or SceneComposer(
            work_dir=self.work_dir,
            subtitle_mode=self._settings.subtitle_mode,
            min_cue_chars=self._settings.min_cue_chars,
            ffmpeg_timeout=self._settings.ffmpeg_timeout,
        )
        self.concatenator = concatenator or SegmentConcatenator(
            work_dir=self.work_dir,
            ffmpeg_timeout=self._settings.ffmpeg_timeout,
        )

    def _resolve(
        self,
        scene: SceneInput,
        location: str,
        stem: str,
    ) -> ResolvedAsset:
        try:
            ref = parse_asset_location(location, root=self.asset_root)
        except ValueError as e:
            raise AssetResolutionError(f"Invalid asset location for scene '{scene.group_id}': {e}") from e
        return self.resolver.resolve(ref, self.work_dir / "assets", stem, scene_id=scene.group_id)

    def compose_scene(self, scene: SceneInput, order: int) -> SceneVideoSegment:
        """Resolve one scene's assets and render its segment.

        Files downloaded or decoded for the scene are removed afterwards,
        whether or not composition succeeded.
        """
        if not scene.image_locations:
            raise MissingAssetError(scene.group_id, "<no image locations>")

        token = scene_token(scene.group_id)
        resolved: List[ResolvedAsset] = []
        try:
            audio = self._resolve(scene, scene.audio_location, f"{token}_audio")
            resolved.append(audio)
            image = self._resolve(scene, scene.image_locations[0], f"{token}_image")
            resolved.append(image)

            subtitle_path: Optional[Path] = None
            if scene.existing_subtitle_location:
                subtitle = self._resolve(scene, scene.existing_subtitle_location, f"{token}_subtitle")
                resolved.append(subtitle)
                subtitle_path = subtitle.path

            return self.composer.compose(
                scene,
                audio_path=audio.path,
                image_path=image.path,
                order=order,
                subtitle_path=subtitle_path,
            )
        finally:
            for asset in resolved:
                asset.cleanup()

    def compose_all(
        self,
        scenes: Sequence[SceneInput],
        max_workers: Optional[int] = None,
    ) -> List[SceneVideoSegment]:
        """Compose every scene, returning segments in input order.

        The first failure aborts the run. In sequential mode no later scene
        is started; in parallel mode pending scenes are cancelled.

        Raises:
            ValueError: If scenes is empty or group ids repeat.
        """
        if not scenes:
            raise ValueError("No scenes provided")

        seen: set[str] = set()
        duplicates: set[str] = set()
        for scene in scenes:
            if scene.group_id in seen:
                duplicates.add(scene.group_id)
            seen.add(scene.group_id)
        if duplicates:
            raise ValueError(f"Duplicate scene group ids: {', '.join(sorted(duplicates))}")

        workers = max_workers or self._settings.max_workers
        if workers <= 1 or len(scenes) == 1:
            segments = []
            for order, scene in enumerate(scenes):
                logger.info(f"[{order + 1}/{len(scenes)}] Scene '{scene.group_id}' {scene.title}".rstrip())
                segments.append(self.compose_scene(scene, order))
            return segments

        logger.info(f"Composing {len(scenes)} scenes with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures: List[Future] = [
                executor.submit(self.compose_scene, scene, order)
                for order, scene in enumerate(scenes)
            ]
            segments = []
            try:
                for future in futures:
                    segments.append(future.result())
            except Exception:
                for future in futures:
                    future.cancel()
                raise
        return segments

    def run(
        self,
        scenes: Sequence[SceneInput],
        output_path: Path,
        run: Optional[RenderRun] = None,
        max_workers: Optional[int] = None,
    ) -> FinalVideo:
        """Compose all scenes and concatenate them into ``output_path``.

        Args:
            scenes: Scenes in playback order.
            output_path: Final video location.
            run: Progress record to update. A new one is used if omitted.
            max_workers: Concurrent scene compositions (default from config).

        Returns:
            The final video with its source segments.
        """
        run = run if run is not None else RenderRun()

        try:
            run.state = RunState.COMPOSING
            segments = self.compose_all(scenes, max_workers=max_workers)
            run.segments = segments

            run.state = RunState.CONCATENATING
            final_path = self.concatenator.concatenate(
                [segment.file_path for segment in segments],
                Path(output_path),
            )
        except Exception as e:
            run.fail(str(e))
            logger.error(f"Render failed: {e}")
            raise

        final_video = FinalVideo(file_path=final_path, source_segments=segments)
        run.final_video = final_video
        run.state = RunState.COMPLETED
        logger.info(f"Final video: {final_path} ({final_video.total_duration:.2f}s of audio)")
        return final_video

"""
Demo application: runs hand detection on the webcam and shows the results.
"""
import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Optional

import cv2

from .config import Cfg, load_config
from .devices_mock import MockDetector, MockRenderer, MockVideoDevice
from .extension import EXTENSION_ID, HandExtension
from .imaging import encode_data_url
from .types import VideoState
from .video import OpenCVVideoDevice

logger = logging.getLogger(__name__)

WRIST = 0
INDEX_TIP = 8


@dataclass
class Stage:
    """Holds the shared video display state for the demo."""
    transparency: float = 50
    state: VideoState = VideoState.OFF


class CameraSnapshotRenderer:
    """Uses the latest camera frame as the stage snapshot."""

    def __init__(self, video: OpenCVVideoDevice):
        self.video = video

    def request_snapshot(self, callback: Callable[[str], object]) -> None:
        frame = self.video.last_frame
        if frame is None:
            raise RuntimeError("No camera frame available for a snapshot")
        callback(encode_data_url(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)))


class HandSensingApp:
    """Main application class for the hand-pose sensing demo."""

    def __init__(self, config_path: Optional[str] = None, use_mock: bool = False):
        """Initialize the application with configuration."""
        self.config: Cfg = load_config(config_path)
        self.use_mock = use_mock
        self.stage = Stage(
            transparency=self.config.display.transparency,
            state=self.config.display.state
        )

        if use_mock:
            self.video = MockVideoDevice()
            renderer = MockRenderer()
            detector = MockDetector()
        else:
            from .landmarker import create_detector

            self.video = OpenCVVideoDevice(self.config.camera)
            renderer = CameraSnapshotRenderer(self.video)
            detector = create_detector(self.config.model)
            if detector is None:
                raise RuntimeError("Hand landmarker could not be created")

        self.extension = HandExtension(
            detector, self.video, renderer,
            display_target=lambda: self.stage,
            cfg=self.config
        )

    def _draw(self, frame):
        """Draw cached landmarks on a BGR frame in display coordinates."""
        ext = self.extension
        height, width = frame.shape[:2]
        stage_w, stage_h = self.config.stage.width, self.config.stage.height
        for hand in range(1, ext.number_of_hands() + 1):
            for index in range(21):
                px = int((ext.hand_landmark_x(hand, index) / stage_w + 0.5) * width)
                py = int((0.5 - ext.hand_landmark_y(hand, index) / stage_h) * height)
                cv2.circle(frame, (px, py), 3, (0, 255, 0), -1)
            wx = int((ext.hand_landmark_x(hand, WRIST) / stage_w + 0.5) * width)
            wy = int((0.5 - ext.hand_landmark_y(hand, WRIST) / stage_h) * height)
            cv2.putText(frame, ext.handedness(hand), (wx + 5, wy - 5),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        return frame

    def _status(self) -> str:
        ext = self.extension
        count = ext.number_of_hands()
        if count == 0:
            return "No hand detected"
        parts = [f"{count} hand(s)"]
        for hand in range(1, count + 1):
            parts.append(
                f"{ext.handedness(hand)} index tip=({ext.hand_landmark_x(hand, INDEX_TIP):.0f}, "
                f"{ext.hand_landmark_y(hand, INDEX_TIP):.0f})"
            )
        return " | ".join(parts)

    async def run(self, duration_s: Optional[float] = None):
        """Run the main application loop."""
        logger.info(f"Starting {EXTENSION_ID}: {self.config.display.window_name}")
        logger.info("Press 'q' in the preview window to quit")

        ext = self.extension
        ext.on_project_loaded()
        ext.start_hand_detection()

        frame_delay = 1.0 / max(1, self.config.camera.fps)
        elapsed = 0.0
        last_status = ""
        try:
            while duration_s is None or elapsed < duration_s:
                await asyncio.sleep(frame_delay)
                elapsed += frame_delay

                status = self._status()
                if status != last_status:
                    print(status)
                    last_status = status

                if self.use_mock:
                    continue

                frame = self.video.last_frame
                if frame is None:
                    continue
                preview = self.video.preview(self._draw(frame.copy()))
                cv2.putText(preview, status, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 255), 2)
                cv2.imshow(self.config.display.window_name, preview)
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
        finally:
            ext.stop_hand_detection()
            self.video.disable()
            if not self.use_mock:
                cv2.destroyAllWindows()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Hand landmark detection demo")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--mock", action="store_true", help="Use mock camera and detector")
    parser.add_argument("--duration", type=float, default=None, help="Stop after this many seconds")
    return parser.parse_args(argv)


async def main(argv=None):
    """Entry point for the application."""
    logging.basicConfig(level=logging.INFO)
    args = parse_args(argv)

    try:
        app = HandSensingApp(config_path=args.config, use_mock=args.mock)
        await app.run(duration_s=args.duration)
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
    except Exception as e:
        logger.error(f"❌ Error: {e}")
        return 1
    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()

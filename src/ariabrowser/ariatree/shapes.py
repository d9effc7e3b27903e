from pydantic import BaseModel


class Rect(BaseModel):
    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def intersects_with(self, other: "Rect") -> bool:
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def translate(self, x: float, y: float) -> "Rect":
        return Rect(x=self.x + x, y=self.y + y, width=self.width, height=self.height)

    @classmethod
    def from_cdp(cls, rect: tuple[float, float, float, float] | list[float]) -> "Rect":
        return cls(x=rect[0], y=rect[1], width=rect[2], height=rect[3])

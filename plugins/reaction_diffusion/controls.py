"""
Parameter Controls for the Reaction-Diffusion Viewer

Small dark-themed widgets drawn directly with pygame: labelled sliders
for the model coefficients, a row of preset buttons and action buttons.
Sliders commit their value when the drag ends, so one drag produces one
parameter change instead of a stream of them.
"""

import pygame


THEME = {
    "bg": (0, 0, 0),
    "panel": (24, 24, 30),
    "track": (55, 55, 68),
    "track_fill": (120, 160, 210),
    "handle": (205, 210, 225),
    "handle_active": (255, 255, 255),
    "text": (180, 185, 195),
    "text_bright": (235, 238, 245),
    "text_dim": (105, 108, 118),
    "button": (42, 44, 56),
    "button_hover": (58, 60, 76),
    "button_active": (80, 110, 180),
    "divider": (44, 44, 58),
}


def snap_to_step(value, min_val, max_val, step=None):
    """Clamp value to [min_val, max_val], then round to the nearest step."""
    value = max(min_val, min(max_val, value))
    if step:
        value = min_val + round((value - min_val) / step) * step
        value = max(min_val, min(max_val, value))
    return value


class Slider:
    """Horizontal slider with label on the left and value on the right.

    on_change(value) fires when the drag is released, or on every move
    when live=True.
    """

    height = 36

    def __init__(self, x, y, width, label, min_val, max_val, value,
                 fmt=".3f", step=None, on_change=None, live=False):
        self.x = x
        self.y = y
        self.width = width
        self.label = label
        self.min_val = min_val
        self.max_val = max_val
        self.fmt = fmt
        self.step = step
        self.on_change = on_change
        self.live = live
        self.value = snap_to_step(value, min_val, max_val, step)
        self.dragging = False
        self.hovered = False

        self.track_y = self.y + 22
        self.track_h = 4
        self.handle_r = 7
        self.track_x = self.x + 8
        self.track_w = self.width - 16

    def value_to_x(self, val):
        span = self.max_val - self.min_val
        frac = (val - self.min_val) / span if span else 0.0
        return self.track_x + frac * self.track_w

    def x_to_value(self, px):
        frac = (px - self.track_x) / self.track_w
        frac = max(0.0, min(1.0, frac))
        val = self.min_val + frac * (self.max_val - self.min_val)
        return snap_to_step(val, self.min_val, self.max_val, self.step)

    def _emit(self):
        if self.on_change:
            self.on_change(self.value)

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            mx, my = event.pos
            if (self.track_x - 4 <= mx <= self.track_x + self.track_w + 4 and
                    self.track_y - 12 <= my <= self.track_y + 12):
                self.dragging = True
                self.value = self.x_to_value(mx)
                if self.live:
                    self._emit()
                return True

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if self.dragging:
                self.dragging = False
                self._emit()
                return True

        elif event.type == pygame.MOUSEMOTION:
            mx, my = event.pos
            hx = self.value_to_x(self.value)
            self.hovered = abs(mx - hx) < 12 and abs(my - self.track_y) < 12
            if self.dragging:
                self.value = self.x_to_value(mx)
                if self.live:
                    self._emit()
                return True

        return False

    def set_value(self, val):
        """Move the handle without firing on_change."""
        self.value = snap_to_step(val, self.min_val, self.max_val, self.step)

    @property
    def value_text(self):
        return f"{self.value:{self.fmt}}"

    def draw(self, surface, font):
        label_surf = font.render(self.label, True, THEME["text"])
        surface.blit(label_surf, (self.x + 8, self.y + 2))

        val_surf = font.render(self.value_text, True, THEME["text_bright"])
        surface.blit(val_surf, (self.x + self.width - val_surf.get_width() - 8, self.y + 2))

        track_rect = pygame.Rect(self.track_x, self.track_y - self.track_h // 2,
                                 self.track_w, self.track_h)
        pygame.draw.rect(surface, THEME["track"], track_rect, border_radius=2)

        hx = self.value_to_x(self.value)
        fill_rect = pygame.Rect(self.track_x, self.track_y - self.track_h // 2,
                                hx - self.track_x, self.track_h)
        pygame.draw.rect(surface, THEME["track_fill"], fill_rect, border_radius=2)

        color = THEME["handle_active"] if (self.dragging or self.hovered) else THEME["handle"]
        pygame.draw.circle(surface, color, (int(hx), self.track_y),
                           self.handle_r + (2 if self.dragging else 0))


class Button:
    """Clickable button with a centered label."""

    def __init__(self, x, y, width, height, label, on_click=None, active=False):
        self.rect = pygame.Rect(x, y, width, height)
        self.label = label
        self.on_click = on_click
        self.active = active
        self.hovered = False

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                if self.on_click:
                    self.on_click()
                return True
        elif event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)
        return False

    def draw(self, surface, font):
        if self.active:
            color = THEME["button_active"]
        elif self.hovered:
            color = THEME["button_hover"]
        else:
            color = THEME["button"]
        pygame.draw.rect(surface, color, self.rect, border_radius=4)

        label_surf = font.render(self.label, True, THEME["text_bright"])
        lx = self.rect.x + (self.rect.width - label_surf.get_width()) // 2
        ly = self.rect.y + (self.rect.height - label_surf.get_height()) // 2
        surface.blit(label_surf, (lx, ly))


class ButtonRow:
    """Wrapping row of mutually exclusive buttons (preset picker)."""

    def __init__(self, x, y, width, labels, selected=0, on_select=None, btn_height=24):
        self.labels = labels
        self.selected = selected
        self.on_select = on_select
        self.buttons = []

        padding = 4
        bx, by = x, y
        for label in labels:
            bw = max(len(label) * 8 + 16, 50)
            if bx + bw > x + width and bx > x:
                bx = x
                by += btn_height + padding
            self.buttons.append(Button(bx, by, bw, btn_height, label))
            bx += bw + padding

        self.total_height = by - y + btn_height
        self.select(selected)

    def select(self, idx):
        self.selected = idx
        for i, btn in enumerate(self.buttons):
            btn.active = (i == idx)

    def handle_event(self, event):
        for i, btn in enumerate(self.buttons):
            if btn.handle_event(event):
                self.select(i)
                if self.on_select:
                    self.on_select(i, self.labels[i])
                return True
        return False

    def draw(self, surface, font):
        for btn in self.buttons:
            btn.draw(surface, font)


class SectionHeader:
    """Divider line with a dim title."""

    height = 24

    def __init__(self, x, y, width, title):
        self.x = x
        self.y = y
        self.width = width
        self.title = title

    def draw(self, surface, font):
        pygame.draw.line(surface, THEME["divider"],
                         (self.x + 8, self.y + 8),
                         (self.x + self.width - 8, self.y + 8))
        title_surf = font.render(self.title, True, THEME["text_dim"])
        surface.blit(title_surf, (self.x + 8, self.y + 12))


class ControlPanel:
    """Vertical stack of widgets drawn at (x, y) on the window.

    Widgets are laid out top to bottom in the order they are added and
    receive events in panel-local coordinates.
    """

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.widgets = []
        self._surface = None
        self._cursor_y = 8

    def add_section(self, title):
        header = SectionHeader(0, self._cursor_y, self.width, title)
        self.widgets.append(header)
        self._cursor_y += header.height + 4
        return header

    def add_slider(self, label, min_val, max_val, value, fmt=".3f",
                   step=None, on_change=None, live=False):
        slider = Slider(0, self._cursor_y, self.width, label,
                        min_val, max_val, value, fmt, step, on_change, live)
        self.widgets.append(slider)
        self._cursor_y += slider.height + 6
        return slider

    def add_button_row(self, labels, selected=0, on_select=None):
        row = ButtonRow(8, self._cursor_y, self.width - 16, labels,
                        selected, on_select)
        self.widgets.append(row)
        self._cursor_y += row.total_height + 8
        return row

    def add_button(self, label, on_click=None):
        btn = Button(8, self._cursor_y, self.width - 16, 28, label, on_click)
        self.widgets.append(btn)
        self._cursor_y += 36
        return btn

    def handle_event(self, event):
        """Route an event to the widgets. Returns True if one consumed it."""
        if hasattr(event, "pos"):
            local = (event.pos[0] - self.x, event.pos[1] - self.y)
            if not (0 <= local[0] <= self.width and 0 <= local[1] <= self.height):
                # A drag released outside the panel still has to commit
                if event.type == pygame.MOUSEBUTTONUP:
                    for widget in self.widgets:
                        if getattr(widget, "dragging", False):
                            widget.handle_event(event)
                return False
            attrs = {k: v for k, v in event.__dict__.items() if k != "pos"}
            attrs["pos"] = local
            event = pygame.event.Event(event.type, attrs)

        for widget in self.widgets:
            if hasattr(widget, "handle_event") and widget.handle_event(event):
                return True
        return False

    def draw(self, target_surface, font):
        if self._surface is None or self._surface.get_size() != (self.width, self.height):
            self._surface = pygame.Surface((self.width, self.height))
        self._surface.fill(THEME["panel"])
        pygame.draw.line(self._surface, THEME["divider"], (0, 0), (0, self.height))
        for widget in self.widgets:
            widget.draw(self._surface, font)
        target_surface.blit(self._surface, (self.x, self.y))

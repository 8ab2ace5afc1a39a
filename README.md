# gofer

Building blocks for a terminal client of a gofer chat server. The package
talks to the server's REST API, keeps track of who is signed in, and models
screens as plain strings with clickable regions (hitboxes), so every part of
the interface can be used with both the keyboard and the mouse.

## What is inside

- `gofer.api` – a typed HTTP client, `Client(base_url, timeout)`, with
  `login`, `register`, `health`, `list_channels`, `create_channel`,
  `join_channel`, `leave_channel`, `delete_channel`, `list_dms`, `start_dm`
  and `delete_dm`. Results are frozen dataclasses (`LoginResponse`, `User`,
  `TokenPair`, `Channel`, `DirectChat`). Error statuses are raised as
  exceptions derived from `ApiError`: `BadRequestError` (400),
  `InvalidCredentialsError` (401), `ForbiddenError` (403), `NotFoundError`
  (404), `ConflictError` (409), `ServerError` (5xx),
  `UnexpectedResponseError` (any other status of 400 or more), and
  `UnreachableError` when the request itself fails.
- `gofer.session` – `AuthState`, what the client remembers about the current
  user, and `AuthenticatedMsg`, the message that carries it after a login.
- `gofer.screen` – `Hitbox`, `hit_test`, the abstract `Screen` class, the
  input messages (`KeyMsg`, `MouseMsg`, `WindowSizeMsg`) and command helpers
  (`batch`, `quit_cmd`, `tick`).
- `gofer.clipboard` – `copy_cmd` and `clear_after_timeout` with the
  `CopiedMsg`, `CopyFailedMsg` and `ClearCopiedMsg` messages they produce.
- `gofer.style` – the colour palette, borders, `Style.render` and layout
  helpers (`join_vertical`, `join_horizontal`, `place`, `space_between`,
  `visible_width`, `text_height`) that measure text by its width on screen
  and ignore colour escape sequences.
- `gofer.confirm` – `ConfirmModel` (confirm / cancel) and `new_warning`
  (a single OK button); both close with a `ResultMsg`.
- `gofer.form` – `FormModel`, a popup with one `TextInput` field and
  submit / cancel buttons, closing with a `FormResultMsg`.
- `gofer.home_messages` – the background commands of the home screen
  (`load_channels_cmd`, `start_dm_cmd`, …), the messages they return and
  `humanize_channel_error` / `humanize_dm_error`.
- `gofer.home_view` and `gofer.home` – `HomeModel`, the main screen with the
  DIRECT and CHANNELS tabs, a management mode and copy-to-clipboard cards.

## Using the API client

```python
from gofer.api import Client, ConflictError

client = Client("http://localhost:8080", 5.0)

password = "password"
client.register("alice", password)
session = client.login("alice", password)
client.set_auth(session.tokens.access_token)

general = client.create_channel("general")
for channel in client.list_channels():
    print(channel.id, channel.name)

try:
    client.start_dm(general.created_by)
except ConflictError:
    print("A direct chat with this user already exists.")
```

Every request sends `Content-Type: application/json`, and, once
`set_auth` has been given a token, `Authorization: Bearer <token>`; an empty
string clears it. `Client.health()` returns `None` when the server answers
with a success status and raises otherwise.

## Driving a screen

Screens follow a message loop: `update(msg)` changes the state and returns
the screen together with a command – a callable that, when run, produces the
next message (or `None` when there is nothing to do). `batch` combines
commands into one that returns a `BatchMsg` holding them. `view()` renders
the state as a string and records the hitboxes that mouse clicks are tested
against; `set_size` and `set_origin` must be called before it, the origin
being the screen's top-left cell in the whole terminal.

```python
from gofer.api import Client
from gofer.home import HomeModel
from gofer.screen import KeyMsg, MouseMsg
from gofer.session import AuthState

client = Client("http://localhost:8080", 5.0)
state = AuthState(user_id="user-1", username="alice", access_token="token")
home = HomeModel(client, state)

command = home.init()          # loads channels and direct chats
home.set_size(78, 24)
home.set_origin(1, 3)
print(home.view())

home, command = home.update(KeyMsg("tab"))
home, command = home.update(MouseMsg(x=5, y=5))
```

Copying to the clipboard writes an OSC 52 escape sequence to the terminal;
when standard output is not a terminal the copy reports `CopyFailedMsg`.
`copy_cmd` takes an optional `copier` callable to copy some other way. The
"copied" feedback is cleared after two seconds by default.

## Home screen keys

- `tab` – switch between DIRECT and CHANNELS
- `up` / `down` – move the cursor, `enter` – select the item under it
- `a` – enter management mode, `esc` – leave it
- `l` – leave the selected channel (management mode)
- `d` – delete the selected channel or direct chat (management mode)

In management mode the mouse wheel scrolls the list by three lines. Clicking
a tab, a list row, an action or an ID card does the same as its key or copies
the ID.

## Popup keys

`esc` cancels, `enter` confirms (or cancels when the cancel button has the
focus), `left` / `right` move between buttons. In a form, `tab` and
`shift+tab` cycle between the field and the buttons; the field accepts
printable characters, `backspace`, `delete`, `left`, `right`, `home` /
`ctrl+a`, `end` / `ctrl+e`, `ctrl+u` and `ctrl+k`.

## What this package does not do

- There is no top-level application: no window frame, header, connection
  indicator or footer, and no quit keys. `HomeModel` renders only the body of
  a screen.
- There is no login or registration screen; the API client can log in, but
  an `AuthState` has to be built by the caller.
- There is no event loop: nothing reads keys or mouse events from a terminal
  or runs the commands the screens return. That is left to the program
  using the package.
- Chat messages are not shown or sent; selecting a channel or direct chat
  shows a placeholder.
- There is no command to run.
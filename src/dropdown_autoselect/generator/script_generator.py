"""
Standalone Script Generator - Emit the engine as a self-executing script.

The emitted program has no dependencies: paste it into a browser console,
inject it with a script tag or save it as a bookmarklet and it runs the same
resolve/select fragments the in-process runner evaluates, driven by a
baked-in copy of the SelectionConfig.
"""

import json
from textwrap import indent
from typing import Optional
from urllib.parse import quote

from dropdown_autoselect.engine.models import SelectionConfig
from dropdown_autoselect.engine.scripts import (
    DISCONNECT_WATCH_JS,
    OPEN_WIDGET_JS,
    PICK_VISIBLE_OPTION_JS,
    SELECT_NATIVE_JS,
    WATCH_MUTATIONS_JS,
)
from dropdown_autoselect.engine.target_resolver import RESOLUTION_ORDER, STRATEGY_SCRIPTS

LOG_PREFIX = "[dropdown-autoselect]"

HEADER = """\
// Dropdown Auto-Select standalone script
// Target control: {target}
"""

# Driver mirroring SelectionRun: retry phase, observer phase, single result
DRIVER_TEMPLATE = r'''
(function () {
    'use strict';

    var CONFIG = __CONFIG__;
    var PREFIX = __PREFIX__;
    // Per-run names; several programs may share one page
    var SUFFIX = Math.random().toString(36).slice(2, 10);
    var WATCH_KEY = '__dropdownAutoselectObserver_' + SUFFIX;
    var WATCH_BINDING = '__dropdownAutoselectNotify_' + SUFFIX;

    var STRATEGIES = [
__STRATEGIES__
    ];
    var selectNative = __SELECT_NATIVE__;
    var openWidget = __OPEN_WIDGET__;
    var pickVisibleOption = __PICK_VISIBLE_OPTION__;
    var watchMutations = __WATCH_MUTATIONS__;
    var disconnectWatch = __DISCONNECT_WATCH__;

    var attempts = 0;

    function log(message) {
        console.log(PREFIX + ' ' + message);
    }

    function sleep(ms) {
        return new Promise(function (done) { setTimeout(done, ms); });
    }

    function resolve(id) {
        for (var i = 0; i < STRATEGIES.length; i++) {
            var element = STRATEGIES[i][1](id);
            if (element) return { element: element, strategy: STRATEGIES[i][0] };
        }
        return null;
    }

    async function checkOptions(id) {
        await sleep(CONFIG.settleDelayMs);
        var label;
        try {
            label = pickVisibleOption();
        } catch (error) {
            log("Option check for '" + id + "' failed: " + error);
            return { kind: 'not_found' };
        }
        if (label === null) {
            log("No visible options after opening '" + id + "'");
            return { kind: 'not_found' };
        }
        log("Selected '" + label + "' in custom widget");
        return { kind: 'success', label: label, via: 'custom-widget' };
    }

    async function attempt() {
        attempts += 1;
        var number = attempts;
        var id = CONFIG.targetControlId;
        var check;
        try {
            var resolved = resolve(id);
            if (!resolved) {
                log('Attempt ' + number + ": Control '" + id + "' not found");
                return { kind: 'not_found' };
            }
            log('Attempt ' + number + ": found '" + id + "' by " + resolved.strategy);
            if (resolved.element.tagName.toUpperCase() === 'SELECT') {
                var result = selectNative(resolved.element);
                if (!result.ok) {
                    log('Attempt ' + number + ": Control '" + id + "' has no selectable option");
                    return { kind: 'not_found' };
                }
                log("Selected '" + result.label + "' (option " + result.index + ') in native select');
                return { kind: 'success', label: result.label, via: 'native-select' };
            }
            openWidget(resolved.element);
            log("Opened custom widget '" + id + "', checking options in " + CONFIG.settleDelayMs + ' ms');
            check = checkOptions(id);
        } catch (error) {
            log('Attempt ' + number + ' failed unexpectedly: ' + error);
            return { kind: 'not_found' };
        }
        if (CONFIG.awaitCustomWidget) return await check;
        return { kind: 'pending', check: check };
    }

    function observe() {
        return new Promise(function (settle) {
            var queued = 0;
            var busy = false;
            var finished = false;
            var timer = null;

            function finish(outcome) {
                if (finished) return;
                finished = true;
                disconnectWatch(WATCH_KEY);
                delete window[WATCH_BINDING];
                clearTimeout(timer);
                settle(outcome);
            }

            async function drain() {
                if (busy) return;
                busy = true;
                while (queued > 0 && !finished) {
                    queued -= 1;
                    var outcome = await attempt();
                    if (outcome.kind !== 'not_found') finish(outcome);
                }
                busy = false;
            }

            window[WATCH_BINDING] = function (key, added) {
                if (finished || key !== WATCH_KEY || added <= 0) return;
                queued += 1;
                drain();
            };
            watchMutations([WATCH_KEY, WATCH_BINDING]);
            log('Observing document changes for up to ' + CONFIG.observerTimeoutMs + ' ms');
            timer = setTimeout(function () {
                if (finished) return;
                log('Timed out after ' + CONFIG.observerTimeoutMs + ' ms without a selection');
                finish(null);
            }, CONFIG.observerTimeoutMs);
        });
    }

    async function run() {
        var id = CONFIG.targetControlId;
        var total = CONFIG.maxRetries + 1;
        var retries = 0;
        var outcome;
        log("Looking for control '" + id + "'");
        while (true) {
            outcome = await attempt();
            if (outcome.kind !== 'not_found') break;
            if (retries >= CONFIG.maxRetries) {
                log('Attempt ' + (retries + 1) + '/' + total + ' failed; retries exhausted, watching the document for changes');
                outcome = await observe();
                break;
            }
            log('Attempt ' + (retries + 1) + '/' + total + ' failed; retrying in ' + CONFIG.retryDelayMs + ' ms');
            await sleep(CONFIG.retryDelayMs);
            retries += 1;
        }
        if (!outcome) {
            log("Gave up on '" + id + "'");
            return { state: 'timed_out', label: null, attempts: attempts };
        }
        if (outcome.kind === 'success') {
            log("Selected '" + outcome.label + "' via " + outcome.via);
        } else {
            log('Custom widget opened; option result follows asynchronously');
        }
        return { state: 'succeeded', label: outcome.label || null, attempts: attempts };
    }

    return run();
})();
'''.strip()


def _fragment(script: str, level: int = 1) -> str:
    """Indent a multi-line fragment so it sits at the given nesting level."""
    lines = script.splitlines()
    if len(lines) == 1:
        return script
    return lines[0] + "\n" + indent("\n".join(lines[1:]), "    " * level)


class StandaloneScriptGenerator:
    """
    Render the selection engine as a standalone JavaScript program.

    Example:
        >>> generator = StandaloneScriptGenerator()
        >>> script = generator.generate(SelectionConfig(target_control_id="region"))
        >>> script.startswith("// Dropdown Auto-Select")
        True
    """

    def __init__(self, include_header: bool = True, log_prefix: Optional[str] = None):
        """
        Initialize the generator.

        Args:
            include_header: Prefix the program with a comment header
            log_prefix: Console prefix for progress lines
        """
        self._header = include_header
        self._prefix = log_prefix or LOG_PREFIX

    def generate(self, config: SelectionConfig) -> str:
        """
        Generate the program with the config baked in.

        Args:
            config: Configuration copied into the script

        Returns:
            JavaScript source
        """
        strategies = ",\n".join(
            indent(f"[{json.dumps(strategy.value)}, {STRATEGY_SCRIPTS[strategy]}]", "        ")
            for strategy in RESOLUTION_ORDER
        )

        body = (
            DRIVER_TEMPLATE
            .replace("__PREFIX__", json.dumps(self._prefix))
            .replace("__STRATEGIES__", strategies)
            .replace("__SELECT_NATIVE__", _fragment(SELECT_NATIVE_JS))
            .replace("__OPEN_WIDGET__", _fragment(OPEN_WIDGET_JS))
            .replace("__PICK_VISIBLE_OPTION__", _fragment(PICK_VISIBLE_OPTION_JS))
            .replace("__WATCH_MUTATIONS__", _fragment(WATCH_MUTATIONS_JS))
            .replace("__DISCONNECT_WATCH__", _fragment(DISCONNECT_WATCH_JS))
            # Config last: its values are user text
            .replace("__CONFIG__", _fragment(json.dumps(config.to_dict(), indent=4)))
        )

        if self._header:
            # Keep the comment on one line whatever the identifier contains
            target = json.dumps(config.target_control_id)
            return HEADER.format(target=target) + body + "\n"
        return body + "\n"

    def as_bookmarklet(self, config: SelectionConfig) -> str:
        """Render the program as a ``javascript:`` URL."""
        script = StandaloneScriptGenerator(include_header=False, log_prefix=self._prefix).generate(config)
        return "javascript:" + quote(script, safe="")

ARCHIVE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>The Archive of Collapse</title>
    <style>
      :root {
        --bg: #000000;
        --fg: #d4d4d8;
        --muted: #71717a;
        --dim: #27272a;
        --card: #09090b;
        --blood: rgba(127, 29, 29, 0.8);
      }
      body {
        margin: 0;
        background: var(--bg);
        color: var(--fg);
        font-family: Georgia, "Times New Roman", serif;
      }
      .wrap { max-width: 760px; margin: 0 auto; padding: 48px 24px 80px; }
      header { text-align: center; margin-bottom: 56px; }
      h1 {
        margin: 0;
        padding-bottom: 28px;
        font-size: 44px;
        letter-spacing: 0.2em;
        text-transform: uppercase;
        color: #f4f4f5;
        border-bottom: 1px solid #18181b;
      }
      .motto { font-style: italic; color: var(--muted); }
      .panel { background: rgba(9, 9, 11, 0.5); border: 1px solid #18181b; padding: 32px; }
      .panel h2 { text-align: center; color: var(--blood); font-size: 13px; letter-spacing: 0.2em; text-transform: uppercase; }
      label { display: block; font-size: 11px; letter-spacing: 0.15em; text-transform: uppercase; color: var(--muted); margin: 18px 0 6px; }
      input, select, textarea {
        width: 100%;
        box-sizing: border-box;
        background: var(--card);
        color: var(--fg);
        border: 1px solid var(--dim);
        padding: 10px 12px;
        font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace;
      }
      input[readonly] { cursor: not-allowed; opacity: 0.7; }
      textarea { min-height: 90px; resize: none; }
      .row { display: grid; grid-template-columns: 1fr 1fr; gap: 18px; }
      button {
        background: #450a0a;
        color: #f4f4f5;
        border: 1px solid var(--blood);
        padding: 12px 20px;
        letter-spacing: 0.15em;
        text-transform: uppercase;
        cursor: pointer;
      }
      button:disabled { opacity: 0.5; cursor: not-allowed; }
      #randomize { background: var(--card); border-color: var(--dim); color: var(--muted); margin: 22px auto 0; display: block; }
      .actions { margin-top: 36px; text-align: right; }
      .out-head { display: flex; justify-content: space-between; align-items: center; margin-top: 48px; border-top: 2px solid #18181b; padding-top: 28px; }
      .out-head h2 { color: var(--muted); letter-spacing: 0.15em; text-transform: uppercase; font-size: 18px; }
      #receiving { color: #7f1d1d; font-family: monospace; font-size: 11px; letter-spacing: 0.15em; display: none; }
      #pane { min-height: 400px; max-height: 800px; overflow-y: auto; padding: 24px; border: 1px solid #18181b; }
      .case-card { background: var(--card); border: 1px solid var(--dim); padding: 22px; margin-bottom: 28px; }
      .case-card-head { display: flex; justify-content: space-between; border-bottom: 1px solid #18181b; margin-bottom: 14px; }
      .case-card-head h3 { color: var(--blood); font-size: 12px; letter-spacing: 0.2em; font-family: sans-serif; }
      .file-label { color: var(--dim); font-family: monospace; font-size: 10px; }
      .case-card-body { font-family: ui-monospace, Menlo, Consolas, monospace; line-height: 1.7; white-space: pre-wrap; }
      .cursor { display: inline-block; width: 8px; height: 16px; margin-left: 4px; background: #7f1d1d; vertical-align: middle; }
      .cursor, .pulse, #receiving { animation: pulse 1.2s ease-in-out infinite; }
      .placeholder { display: flex; align-items: center; justify-content: center; min-height: 300px; color: var(--dim); font-family: monospace; }
      footer { margin-top: 64px; text-align: center; color: #27272a; font-family: monospace; font-size: 11px; letter-spacing: 0.15em; text-transform: uppercase; }
      @keyframes pulse { 50% { opacity: 0.3; } }
    </style>
  </head>
  <body>
    <div class="wrap">
      <header>
        <h1>The Archive of Collapse</h1>
        <p class="motto">&ldquo;Nature demands diversity. To deny it is to invite the end.&rdquo;</p>
      </header>

      <div class="panel">
        <h2>New Case File</h2>

        <div class="row">
          <div>
            <label for="era">Starting Era</label>
            <input id="era" name="era" placeholder="e.g. Late 1800s" autofocus />
          </div>
          <div>
            <label for="language">Language</label>
            <select id="language" name="language"></select>
          </div>
        </div>

        <label for="location">Location / Setting (Locked)</label>
        <input id="location" name="location" readonly />

        <button id="randomize" type="button" title="Randomize Catalyst">Randomize Catalyst</button>

        <label for="catalyst">The Catalyst for Isolation (Randomizable)</label>
        <textarea id="catalyst" name="catalyst" readonly></textarea>

        <div class="actions">
          <button id="generate" type="button">Unearth Story</button>
        </div>

        <div class="out-head">
          <h2>Case File Narrative</h2>
          <span id="receiving">[ Receiving Transmission ]</span>
        </div>
        <div id="pane"></div>
      </div>

      <footer>
        <p>Restricted Access // Clearance Level 4 Required</p>
        <p>System ID: 99-A-771</p>
      </footer>
    </div>

    <script>
      const el = (id) => document.getElementById(id);
      let opts = null;
      let params = null;
      let streaming = false;
      let live = false;
      let buffer = '';
      let renderQueued = false;

      function isComplete(p) {
        return Boolean(p && p.location.trim() && p.era.trim() && p.language.trim() && p.catalyst.trim());
      }

      function escapeHtml(s) {
        return s.replace(/&/g, '&amp;').replace(/</g, '&lt;').replace(/>/g, '&gt;')
          .replace(/"/g, '&quot;').replace(/'/g, '&#x27;');
      }

      function syncButtons() {
        const gen = el('generate');
        gen.disabled = streaming || !isComplete(params);
        gen.textContent = streaming ? 'Compiling sealed records...' : 'Unearth Story';
      }

      function showParams(p) {
        params = p;
        el('location').value = p.location;
        if (document.activeElement !== el('era')) el('era').value = p.era;
        el('language').value = p.language;
        el('catalyst').value = p.catalyst;
        syncButtons();
      }

      function showStory(story) {
        const pane = el('pane');
        pane.innerHTML = story.html;
        el('receiving').style.display = story.receiving ? 'inline' : 'none';
        if (story.pin_to_bottom) pane.scrollTop = pane.scrollHeight;
      }

      // Same rules as the server renderer: titles by raw split position, cursor on the last card.
      function renderBuffer(text) {
        if (!text) {
          return { html: `<div class="placeholder"><p class="pulse">${escapeHtml(opts.placeholder)}</p></div>`, receiving: true, pin_to_bottom: true };
        }
        const pieces = [];
        text.split(opts.section_marker).forEach((piece, index) => {
          const clean = piece.trim();
          if (clean) pieces.push({ index, clean });
        });
        const html = pieces.map((p, i) => {
          const title = opts.section_titles[p.index] || `SECTION ${p.index + 1}`;
          const cursor = i === pieces.length - 1 ? '<span class="cursor"></span>' : '';
          return '<div class="case-card"><div class="case-card-head">'
            + `<h3>${escapeHtml(title)}</h3><span class="file-label">FILE-0${p.index + 1}</span></div>`
            + `<div class="case-card-body">${escapeHtml(p.clean)}${cursor}</div></div>`;
        }).join('');
        return { html, receiving: true, pin_to_bottom: true };
      }

      // Fragments can arrive faster than frames; re-derive the cards at most once per frame.
      function scheduleRender() {
        if (renderQueued) return;
        renderQueued = true;
        requestAnimationFrame(() => {
          renderQueued = false;
          if (live) showStory(renderBuffer(buffer));
        });
      }

      async function updateField(field, value) {
        params = Object.assign({}, params, { [field]: value });
        syncButtons();
        const res = await fetch('/api/case', {
          method: 'PATCH',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ field, value }),
        });
        if (res.ok) showParams(await res.json());
      }

      async function randomizeCatalyst() {
        const res = await fetch('/api/case/randomize', { method: 'POST' });
        if (res.ok) showParams(await res.json());
      }

      function handleEvent(raw) {
        const line = raw.split(String.fromCharCode(10)).find((l) => l.startsWith('data: '));
        if (!line) return;
        const event = JSON.parse(line.slice(6));
        if (event.type === 'fragment') {
          buffer += event.text;
          scheduleRender();
          return;
        }
        live = false;
        showStory(event.story);
      }

      async function unearthStory() {
        // Incomplete parameters block submission silently.
        if (streaming || !isComplete(params)) return;
        streaming = true;
        live = true;
        buffer = '';
        syncButtons();
        showStory(renderBuffer(buffer));
        try {
          const res = await fetch('/api/case/generate', { method: 'POST' });
          if (!res.ok || !res.body) return;
          const reader = res.body.pipeThrough(new TextDecoderStream()).getReader();
          let pending = '';
          while (true) {
            const { done, value } = await reader.read();
            if (done) break;
            pending += value;
            const events = pending.split('\\n\\n');
            pending = events.pop();
            events.forEach(handleEvent);
          }
          if (pending.trim()) handleEvent(pending);
        } finally {
          live = false;
          streaming = false;
          syncButtons();
        }
      }

      async function boot() {
        opts = await (await fetch('/api/options')).json();
        el('language').innerHTML = opts.languages.map((l) => `<option value="${l}">${l}</option>`).join('');
        const state = await (await fetch('/api/case')).json();
        showParams(state.parameters);
        showStory(state.story);
        el('era').addEventListener('input', (e) => updateField('era', e.target.value));
        el('language').addEventListener('change', (e) => updateField('language', e.target.value));
        el('randomize').addEventListener('click', randomizeCatalyst);
        el('generate').addEventListener('click', unearthStory);
      }

      boot();
    </script>
  </body>
</html>
"""

"""Single-page HTML/JS front end served at ``/``."""

PAGE_HTML = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>promptmap</title>
<link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.9.0/styles/github-dark.min.css">
<script src="https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.9.0/highlight.min.js"></script>
<style>
  *, *::before, *::after { box-sizing: border-box; }
  body {
    background: #0f172a;
    color: #e2e8f0;
    font-family: 'Segoe UI', system-ui, -apple-system, sans-serif;
    margin: 0;
  }
  .screen { display: none; padding: 24px; }
  .screen.active { display: block; }
  input, textarea, button {
    background: #1e293b; color: #e2e8f0;
    border: 1px solid #334155; border-radius: 6px;
    padding: 8px 10px; font: inherit;
  }
  button { cursor: pointer; background: #0ea5e9; border: none; color: #0f172a; font-weight: 600; }
  button:disabled { opacity: 0.5; cursor: wait; }
  #controls { display: flex; gap: 8px; margin-bottom: 16px; }
  #language-input { width: 200px; }
  #prompt-input { flex: 1; min-height: 60px; }
  #panels { display: grid; grid-template-columns: 1fr 2fr; gap: 16px; }
  .panel h3 { color: #38bdf8; font-size: 14px; margin: 0 0 8px; }
  .segment-card {
    border-left: 5px solid transparent;
    background: #1e293b;
    border-radius: 6px;
    padding: 8px 12px;
    margin-bottom: 8px;
    transition: background 0.1s, transform 0.1s;
  }
  .segment-card pre { margin: 0; white-space: pre-wrap; }
  .segment-card.is-hovered { background: #334155; transform: translateX(4px); }
  .error { color: #f87171; }
</style>
</head>
<body>
<div id="api-key-screen" class="screen">
  <h2>promptmap</h2>
  <p>Enter your Gemini API key to start.</p>
  <input id="api-key-input" type="password" size="48" placeholder="API key">
  <button id="start-btn">Start</button>
</div>

<div id="main-app" class="screen">
  <div id="controls">
    <input id="language-input" placeholder="Language / framework">
    <textarea id="prompt-input" placeholder="Describe the code you want"></textarea>
    <button id="generate-btn">Generate</button>
  </div>
  <div id="panels">
    <div class="panel" id="prompt-display"><h3>Your prompt</h3></div>
    <div class="panel" id="code-display"><h3>Generated code</h3></div>
  </div>
</div>

<script>
const HAS_SESSION = __HAS_SESSION__;

const apiKeyScreen = document.getElementById('api-key-screen');
const mainApp = document.getElementById('main-app');
const startBtn = document.getElementById('start-btn');
const generateBtn = document.getElementById('generate-btn');
const apiKeyInput = document.getElementById('api-key-input');
const languageInput = document.getElementById('language-input');
const promptInput = document.getElementById('prompt-input');
const promptDisplay = document.getElementById('prompt-display');
const codeDisplay = document.getElementById('code-display');

// segment id -> rendered card elements; rebuilt on every render.
let cardsById = new Map();

function showMain() {
  apiKeyScreen.classList.remove('active');
  mainApp.classList.add('active');
}

async function postJSON(url, body) {
  const resp = await fetch(url, {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify(body),
  });
  let data = {};
  try { data = await resp.json(); } catch (e) { /* empty body */ }
  return { ok: resp.ok, status: resp.status, data };
}

function clearPanels() {
  promptDisplay.innerHTML = '<h3>Your prompt</h3>';
  codeDisplay.innerHTML = '<h3>Generated code</h3>';
  cardsById = new Map();
}

function setLinked(id, linked) {
  (cardsById.get(id) || []).forEach(el => el.classList.toggle('is-hovered', linked));
}

function attachHover(el, id) {
  if (!id) return;
  if (!cardsById.has(id)) cardsById.set(id, []);
  cardsById.get(id).push(el);
  el.addEventListener('mouseenter', () => setLinked(id, true));
  el.addEventListener('mouseleave', () => setLinked(id, false));
}

function renderSnapshot(snap) {
  clearPanels();
  snap.prompt_cards.forEach((card, i) => {
    const promptEl = document.createElement('div');
    promptEl.className = 'segment-card prompt-card';
    promptEl.style.borderLeftColor = card.color;
    if (card.segment_id) promptEl.dataset.id = card.segment_id;
    promptEl.textContent = card.text;

    const codeCard = snap.code_cards[i];
    const codeEl = document.createElement('div');
    codeEl.className = 'segment-card code-card';
    codeEl.style.borderLeftColor = codeCard.color;
    if (codeCard.segment_id) codeEl.dataset.id = codeCard.segment_id;
    const pre = document.createElement('pre');
    const code = document.createElement('code');
    if (codeCard.language_class) code.className = codeCard.language_class;
    code.textContent = codeCard.text;
    if (window.hljs) hljs.highlightElement(code);
    pre.appendChild(code);
    codeEl.appendChild(pre);

    promptDisplay.appendChild(promptEl);
    codeDisplay.appendChild(codeEl);
  });
  // Install hover links over the complete card set.
  promptDisplay.querySelectorAll('.segment-card').forEach(el => attachHover(el, el.dataset.id));
  codeDisplay.querySelectorAll('.segment-card').forEach(el => attachHover(el, el.dataset.id));
}

function showError(message) {
  const p = document.createElement('p');
  p.className = 'error';
  p.textContent = message;
  codeDisplay.appendChild(p);
}

startBtn.addEventListener('click', async () => {
  const apiKey = apiKeyInput.value.trim();
  if (!apiKey) {
    alert('Please enter an API key.');
    return;
  }
  const { ok, data } = await postJSON('/api/session', { api_key: apiKey });
  if (!ok) {
    alert(data.detail || 'The API key is invalid or an error occurred.');
    return;
  }
  showMain();
});

generateBtn.addEventListener('click', async () => {
  const language = languageInput.value.trim();
  const userPrompt = promptInput.value.trim();
  if (!language || !userPrompt) {
    alert('Please enter both the language/framework and the prompt.');
    return;
  }

  generateBtn.disabled = true;
  generateBtn.textContent = '...';
  clearPanels();
  try {
    const { ok, status, data } = await postJSON('/api/generate', {
      target_language: language,
      user_prompt: userPrompt,
    });
    if (ok) {
      renderSnapshot(data);
    } else if (status === 400) {
      alert(data.detail);
    } else {
      showError(data.detail || 'The request could not be processed. Check your API key and prompt.');
    }
  } catch (e) {
    showError('The request could not be processed: ' + e);
  } finally {
    generateBtn.disabled = false;
    generateBtn.textContent = 'Generate';
  }
});

if (HAS_SESSION) { showMain(); } else { apiKeyScreen.classList.add('active'); }
</script>
</body>
</html>
"""
